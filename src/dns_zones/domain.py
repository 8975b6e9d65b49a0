"""Validated domain and record names."""
from __future__ import annotations

import string

from .errors import InvalidNameError

APEX = "@"
WILDCARD = "*"

MAX_LABEL_LENGTH = 63
MAX_NAME_LENGTH = 253

_LABEL_CHARS = frozenset(string.ascii_letters + string.digits + "-")


def label_error(label: str) -> str | None:
    """Return why ``label`` is not a valid DNS label, or None if it is."""
    if not label:
        return "empty label"
    if len(label) > MAX_LABEL_LENGTH:
        return f"label {label[:16]!r}... is longer than {MAX_LABEL_LENGTH} characters"
    bad = sorted(set(label) - _LABEL_CHARS)
    if bad:
        return f"label {label!r} contains invalid characters {''.join(bad)!r}"
    if label.startswith("-") or label.endswith("-"):
        return f"label {label!r} starts or ends with a hyphen"
    return None


def _labels_error(labels: list[str]) -> str | None:
    for label in labels:
        reason = label_error(label)
        if reason:
            return reason
    if len(".".join(labels)) > MAX_NAME_LENGTH:
        return f"name is longer than {MAX_NAME_LENGTH} characters"
    return None


class Domain:
    """Immutable domain name such as ``example.com.`` or the apex ``@``.

    Instances are only created through :meth:`parse`, which validates the text
    label by label. Equality and hashing ignore case; the original spelling is
    kept for display.
    """

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @classmethod
    def parse(cls, text: str) -> Domain:
        """Validate ``text`` and return it as a Domain.

        Raises:
            InvalidNameError: If the text is not ``@`` and does not follow the
                ``label(.label)*`` grammar with an optional trailing dot.
        """
        reason = cls.error(text)
        if reason:
            raise InvalidNameError(f"invalid domain {text!r}: {reason}")
        return cls(text)

    @staticmethod
    def error(text: str) -> str | None:
        """Explain why ``text`` is not a valid domain.

        Args:
            text: Candidate domain, with or without a trailing dot.

        Returns:
            str | None: Description of the first offending label, or None if
            the text is valid.
        """
        if text == APEX:
            return None
        if not text:
            return "empty name"
        body = text[:-1] if text.endswith(".") else text
        return _labels_error(body.split("."))

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Report whether ``text`` is ``@`` or a well-formed domain.

        Args:
            text: Candidate domain.

        Returns:
            bool: True if :meth:`parse` would accept the text.
        """
        return cls.error(text) is None

    @property
    def name(self) -> str:
        return self._name

    @property
    def fqdn(self) -> bool:
        """True when the name ends with a dot."""
        return self._name.endswith(".")

    @property
    def is_apex(self) -> bool:
        return self._name == APEX

    @property
    def labels(self) -> tuple[str, ...]:
        """Dot-separated labels, without the empty root label; empty for ``@``."""
        if self.is_apex:
            return ()
        return tuple(self._name.rstrip(".").split("."))

    def qualified(self) -> Domain:
        """Return the fully-qualified form (trailing dot added if missing)."""
        if self.fqdn or self.is_apex:
            return self
        return Domain(self._name + ".")

    def parent(self) -> tuple[Domain, bool]:
        """Strip the leftmost label.

        Returns:
            ``(parent, False)`` normally. When the domain is already a single
            top-level label (or the apex), returns ``(self, True)`` so that an
            ascent loop terminates.
        """
        labels = self.labels
        if len(labels) <= 1:
            return self, True
        suffix = "." if self.fqdn else ""
        return Domain(".".join(labels[1:]) + suffix), False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Domain):
            return NotImplemented
        return self._name.lower() == other._name.lower()

    def __hash__(self) -> int:
        return hash(self._name.lower())

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Domain({self._name!r})"


class RecordName:
    """Name of a record relative to its zone: ``@``, ``*``, ``*.www`` or ``www``."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @classmethod
    def parse(cls, text: str) -> RecordName:
        """Validate ``text`` and return it as a RecordName.

        Args:
            text: ``@``, ``*``, ``*.label...`` or ``label(.label)*``.

        Returns:
            RecordName: The validated name.

        Raises:
            InvalidNameError: If the text breaks the record-name grammar or
                ends with a dot.
        """
        reason = cls.error(text)
        if reason:
            raise InvalidNameError(f"invalid record name {text!r}: {reason}")
        return cls(text)

    @staticmethod
    def error(text: str) -> str | None:
        """Explain why ``text`` is not a valid record name, or return None."""
        if text in (APEX, WILDCARD):
            return None
        if not text:
            return "empty name"
        if text.endswith("."):
            return "record names are relative to the zone and must not end with '.'"
        labels = text.split(".")
        if labels[0] == WILDCARD:
            labels = labels[1:]
        return _labels_error(labels)

    @classmethod
    def is_valid(cls, text: str) -> bool:
        """Report whether ``text`` is a valid zone-relative record name."""
        return cls.error(text) is None

    @property
    def is_apex(self) -> bool:
        return self._name == APEX

    @property
    def is_wildcard(self) -> bool:
        return self._name == WILDCARD or self._name.startswith(WILDCARD + ".")

    def absolute(self, authority: Domain) -> str:
        """Expand the name under ``authority``, e.g. ``www`` -> ``www.example.com.``."""
        origin = str(authority.qualified())
        if self.is_apex:
            return origin
        return f"{self._name}.{origin}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordName):
            return NotImplemented
        return self._name.lower() == other._name.lower()

    def __hash__(self) -> int:
        return hash(self._name.lower())

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"RecordName({self._name!r})"
