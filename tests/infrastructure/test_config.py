# tests/infrastructure/test_config.py
from collections.abc import Generator

import pytest

from atelie.infrastructure.config import get_settings


@pytest.fixture(autouse=True)
def _limpar_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_padroes(monkeypatch: pytest.MonkeyPatch):
    for nome in ("ATELIE_STORE", "API_CORS_ORIGINS", "LOG_LEVEL", "ATELIE_REMOTE_TIMEOUT"):
        monkeypatch.delenv(nome, raising=False)
    settings = get_settings()
    assert settings.store == "local"
    assert settings.cors_origins == ("http://localhost:5173",)
    assert settings.log_level == "INFO"
    assert settings.remote_timeout == 10.0


def test_store_e_origens_do_ambiente(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATELIE_STORE", "DuckDB")
    monkeypatch.setenv("API_CORS_ORIGINS", "http://a.test, http://b.test,")
    settings = get_settings()
    assert settings.store == "duckdb"
    assert settings.cors_origins == ("http://a.test", "http://b.test")


def test_store_invalido(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATELIE_STORE", "sqlite")
    with pytest.raises(ValueError, match="ATELIE_STORE"):
        get_settings()


def test_vinculos_de_token_do_duckdb(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATELIE_DUCKDB_TOKENS", "tok-ana=atelie-ana, tok-bia = atelie-bia,")
    assert get_settings().duckdb_tokens == {"tok-ana": "atelie-ana", "tok-bia": "atelie-bia"}


def test_vinculos_de_token_sem_padrao(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("ATELIE_DUCKDB_TOKENS", raising=False)
    assert get_settings().duckdb_tokens == {}


def test_vinculo_de_token_malformado(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ATELIE_DUCKDB_TOKENS", "tok-sem-organizacao")
    with pytest.raises(ValueError, match="ATELIE_DUCKDB_TOKENS"):
        get_settings()
