from pathlib import Path

import pytest

from aggregator_api.config import load_settings, parse_sources, validate_sources


def test_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    for var in ("VAULT_DIR", "NOTE_SOURCES", "AGGREGATES_DIR", "API_DEBUG_LOG", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)

    settings = load_settings()
    assert settings.vault_dir == (tmp_path / "vault").resolve()
    assert settings.aggregates_dir == (tmp_path / "output").resolve()
    assert [(s.key, s.name) for s in settings.sources] == [("daily", "Daily Journal")]
    assert settings.sources[0].path == (tmp_path / "vault" / "daily").resolve()
    assert settings.api_debug_log is False
    assert settings.log_level == "INFO"


def test_sources_from_environment(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))
    monkeypatch.setenv(
        "NOTE_SOURCES",
        "daily=Daily Journal|daily; work=Work Journal|my stuff/my journals/work-journal;",
    )
    settings = load_settings()
    work = settings.source("work")
    assert work is not None
    assert work.name == "Work Journal"
    assert work.path == (tmp_path / "my stuff" / "my journals" / "work-journal").resolve()
    assert settings.source("missing") is None


def test_absolute_source_path_is_kept(tmp_path: Path) -> None:
    elsewhere = tmp_path / "elsewhere"
    (source,) = parse_sources(f"x=X|{elsewhere}", tmp_path / "vault")
    assert source.path == elsewhere.resolve()


@pytest.mark.parametrize("raw", ["daily", "daily=Daily", "=Daily|daily", "a=A|a;a=B|b"])
def test_malformed_sources_rejected(raw: str, tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        parse_sources(raw, tmp_path)


def test_validate_sources_reports_missing(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "daily").mkdir()
    monkeypatch.setenv("VAULT_DIR", str(tmp_path))
    monkeypatch.setenv("NOTE_SOURCES", "daily=Daily|daily")
    assert validate_sources(load_settings()) is True

    monkeypatch.setenv("NOTE_SOURCES", "daily=Daily|daily;work=Work|work")
    assert validate_sources(load_settings()) is False
