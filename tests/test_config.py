import pytest

from dns_zones.config import Settings, load_settings


def write(tmp_path, text):
    path = tmp_path / "settings.yaml"
    path.write_text(text)
    return str(path)


def test_defaults(tmp_path):
    settings = load_settings(write(tmp_path, ""))
    assert settings == Settings()
    assert settings.workers == 4
    assert settings.log_level == "INFO"


def test_full_settings(tmp_path):
    settings = load_settings(
        write(tmp_path, "zones: /etc/zones\nlog_level: debug\nworkers: 2\nextensions: [zone, .db]\n")
    )
    assert settings.zones == "/etc/zones"
    assert settings.log_level == "DEBUG"
    assert settings.workers == 2
    assert settings.extensions == [".zone", ".db"]


@pytest.mark.parametrize(
    "text, message",
    [
        ("zones: [unclosed\n", "YAML parsing error"),
        ("- a\n- b\n", "settings must be a mapping"),
        ("zonez: /tmp\n", "unknown settings: zonez"),
        ("log_level: loud\n", "invalid log_level 'LOUD'"),
        ("workers: many\n", "invalid workers"),
        ("workers: 0\n", "workers must be positive"),
        ("extensions: zone\n", "'extensions' must be a list"),
    ],
)
def test_invalid_settings(tmp_path, text, message):
    with pytest.raises(ValueError, match=message):
        load_settings(write(tmp_path, text))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(str(tmp_path / "missing.yaml"))
