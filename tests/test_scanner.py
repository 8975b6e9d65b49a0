import io

import pytest

from dns_zones.errors import ScanError
from dns_zones.scanner import Scanner, TokenKind


def scan(text):
    return [(t.kind, t.value) for t in Scanner(io.StringIO(text))]


def test_record_line():
    assert scan("foo A 1.2.3.4 300\n") == [
        (TokenKind.IDENT, "foo"),
        (TokenKind.RECTYPE, "A"),
        (TokenKind.IP, "1.2.3.4"),
        (TokenKind.INT, "300"),
        (TokenKind.NEWLINE, "\n"),
        (TokenKind.EOF, ""),
    ]


def test_comment_is_discarded():
    assert scan("foo A 1.2.3.4 ; trailing comment\n") == scan("foo A 1.2.3.4\n")


def test_comment_directly_after_token():
    assert scan("foo;comment\nbar\n") == [
        (TokenKind.IDENT, "foo"),
        (TokenKind.NEWLINE, "\n"),
        (TokenKind.IDENT, "bar"),
        (TokenKind.NEWLINE, "\n"),
        (TokenKind.EOF, ""),
    ]


def test_quoted_keeps_space_and_semicolon():
    assert scan('"a ; b"') == [(TokenKind.IDENT, "a ; b"), (TokenKind.EOF, "")]


def test_quoted_is_always_identifier():
    assert scan('"300" "zone" ""') == [
        (TokenKind.IDENT, "300"),
        (TokenKind.IDENT, "zone"),
        (TokenKind.IDENT, ""),
        (TokenKind.EOF, ""),
    ]


def test_escapes():
    assert scan(r"a\ b c\;d \"e") == [
        (TokenKind.IDENT, "a b"),
        (TokenKind.IDENT, "c;d"),
        (TokenKind.IDENT, '"e'),
        (TokenKind.EOF, ""),
    ]
    assert scan(r'"say \"hi\""') == [(TokenKind.IDENT, 'say "hi"'), (TokenKind.EOF, "")]


def test_classification():
    kinds = [t.kind for t in Scanner(io.StringIO("zone ttl -5 ::1 AAAA MX example.com"))]
    assert kinds == [
        TokenKind.KEYWORD,
        TokenKind.KEYWORD,
        TokenKind.INT,
        TokenKind.IP,
        TokenKind.RECTYPE,
        TokenKind.RECTYPE,
        TokenKind.IDENT,
        TokenKind.EOF,
    ]


def test_keywords_are_case_sensitive():
    assert scan("ZONE a")[0] == (TokenKind.IDENT, "ZONE")


def test_line_numbers():
    tokens = list(Scanner(io.StringIO("a\n\n  b ; x\nc")))
    assert [(t.value, t.line) for t in tokens if t.kind is TokenKind.IDENT] == [("a", 1), ("b", 3), ("c", 4)]


def test_eof_repeats():
    s = Scanner(io.StringIO("x"))
    assert s.next().kind is TokenKind.IDENT
    for _ in range(3):
        assert s.next().kind is TokenKind.EOF


def test_bytes_stream():
    assert scan_bytes("héllo TXT\n".encode("utf-8"))[0] == (TokenKind.IDENT, "héllo")


def scan_bytes(data):
    return [(t.kind, t.value) for t in Scanner(io.BytesIO(data))]


def test_crlf_line_endings():
    assert scan("a\r\nb") == [
        (TokenKind.IDENT, "a"),
        (TokenKind.NEWLINE, "\n"),
        (TokenKind.IDENT, "b"),
        (TokenKind.EOF, ""),
    ]


def test_unterminated_quote():
    with pytest.raises(ScanError, match="unterminated quoted construct"):
        scan('foo "bar')


def test_line_break_in_quote():
    with pytest.raises(ScanError, match="line break inside quoted construct") as exc:
        scan('foo "bar\nbaz"')
    assert exc.value.line == 1


def test_io_error_propagates():
    class Broken(io.StringIO):
        def read(self, size=-1):
            if size:
                raise OSError("disk on fire")
            return ""

    with pytest.raises(OSError, match="disk on fire"):
        Scanner(Broken()).next()


def test_backslash_before_newline_keeps_line_break():
    expected = [
        (TokenKind.IDENT, "a"),
        (TokenKind.NEWLINE, "\n"),
        (TokenKind.IDENT, "b"),
        (TokenKind.EOF, ""),
    ]
    assert scan("a\\\nb") == expected
    assert scan("a \\\nb") == expected


def test_byte_order_mark_dropped():
    assert scan_bytes(b"\xef\xbb\xbfzone x\n")[:2] == [(TokenKind.KEYWORD, "zone"), (TokenKind.IDENT, "x")]


def test_multibyte_characters_read_one_at_a_time():
    assert scan_bytes("aé中 b".encode("utf-8"))[:2] == [
        (TokenKind.IDENT, "aé中"),
        (TokenKind.IDENT, "b"),
    ]


def test_bytes_stream_not_closed():
    stream = io.BytesIO(b"foo A 1.2.3.4\n")
    list(Scanner(stream))
    assert not stream.closed
