import pytest

import settings
from env_template import render_env_template, write_env_template
from settings import DEFAULT_BATCH_LIMIT, MAX_BATCH_LIMIT, load_settings_from_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(settings, "load_dotenv", lambda **kw: None)
    for name in ("DATABASE_URL", "TAG_COUNTRY_ID", "TAG_OVERWRITE", "TAG_BATCH_LIMIT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings_from_env()
    assert s.database_url is None
    assert s.country_id is None
    assert s.overwrite is False
    assert s.batch_limit == DEFAULT_BATCH_LIMIT
    assert s.log_level == "INFO"


def test_values_from_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://example/db")
    monkeypatch.setenv("TAG_COUNTRY_ID", "12")
    monkeypatch.setenv("TAG_OVERWRITE", "Yes")
    monkeypatch.setenv("TAG_BATCH_LIMIT", "50")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    s = load_settings_from_env()
    assert s.database_url == "postgresql://example/db"
    assert s.country_id == 12
    assert s.overwrite is True
    assert s.batch_limit == 50
    assert s.log_level == "DEBUG"


def test_malformed_numbers_fall_back(monkeypatch):
    monkeypatch.setenv("TAG_COUNTRY_ID", "abc")
    monkeypatch.setenv("TAG_BATCH_LIMIT", "lots")
    s = load_settings_from_env()
    assert s.country_id is None
    assert s.batch_limit == DEFAULT_BATCH_LIMIT


def test_batch_limit_clamped(monkeypatch):
    monkeypatch.setenv("TAG_BATCH_LIMIT", "999999")
    assert load_settings_from_env().batch_limit == MAX_BATCH_LIMIT
    monkeypatch.setenv("TAG_BATCH_LIMIT", "-4")
    assert load_settings_from_env().batch_limit == 1
    monkeypatch.setenv("TAG_BATCH_LIMIT", "0")
    assert load_settings_from_env().batch_limit == 1


def test_env_template_lists_settings(tmp_path):
    p = write_env_template(tmp_path / ".env.template")
    text = p.read_text(encoding="utf-8")
    for name in ("DATABASE_URL", "TAG_COUNTRY_ID", "TAG_OVERWRITE", "TAG_BATCH_LIMIT", "LOG_LEVEL"):
        assert f"{name}=" in text
    assert f"TAG_BATCH_LIMIT={DEFAULT_BATCH_LIMIT}\n" in text


def test_env_template_refuses_to_clobber(tmp_path):
    p = tmp_path / ".env"
    p.write_text("DATABASE_URL=postgresql://keep/me\n", encoding="utf-8")
    with pytest.raises(FileExistsError):
        write_env_template(p)
    assert "keep" in p.read_text(encoding="utf-8")
    write_env_template(p, overwrite=True)
    assert "DATABASE_URL=\n" in p.read_text(encoding="utf-8")


def test_env_template_prefill_skips_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://secret/db")
    monkeypatch.setenv("TAG_COUNTRY_ID", "7")
    text = render_env_template(from_env=True)
    assert "TAG_COUNTRY_ID=7\n" in text
    assert "secret" not in text
    assert "DATABASE_URL=\n" in text
