import pytest

from grouplog.config.verbosity_config import (
    VerbositySetting,
    VerbositySpecError,
    apply_verbosity_spec,
    parse_verbosity_spec,
)
from grouplog.logging.log_level import LogLevel
from grouplog.logging.verbosity_registry import VerbosityRegistry


def test_bare_level_applies_to_all() -> None:
    assert parse_verbosity_spec("debug") == [VerbositySetting("all", LogLevel.debug)]


def test_group_entries() -> None:
    settings = parse_verbosity_spec("warn, core/ipc=debug ,script/lib/tab = verbose")
    assert settings == [
        VerbositySetting("all", LogLevel.warn),
        VerbositySetting("core/ipc", LogLevel.debug),
        VerbositySetting("script/lib/tab", LogLevel.verbose),
    ]


def test_empty_entries_skipped() -> None:
    assert parse_verbosity_spec("") == []
    assert parse_verbosity_spec(",,error,") == [VerbositySetting("all", LogLevel.error)]


def test_unknown_level_rejected() -> None:
    with pytest.raises(VerbositySpecError) as excinfo:
        parse_verbosity_spec("core/ipc=loud")
    assert excinfo.value.entry == "core/ipc=loud"
    assert isinstance(excinfo.value, ValueError)


def test_level_names_case_sensitive() -> None:
    with pytest.raises(VerbositySpecError):
        parse_verbosity_spec("DEBUG")


def test_missing_group_rejected() -> None:
    with pytest.raises(VerbositySpecError):
        parse_verbosity_spec("=debug")


def test_apply_last_write_wins() -> None:
    registry = VerbosityRegistry()
    apply_verbosity_spec(registry, "core=debug,core=error")
    assert registry.get("core/foo") == LogLevel.error


def test_apply_is_all_or_nothing() -> None:
    registry = VerbosityRegistry()
    with pytest.raises(VerbositySpecError):
        apply_verbosity_spec(registry, "core=debug,core=nope")
    assert not registry.is_configured()
