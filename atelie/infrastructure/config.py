# atelie/infrastructure/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

STORES_VALIDOS = ("local", "duckdb", "remote")


@dataclass(frozen=True)
class Settings:
    store: str
    local_path: str
    seed_servicos: bool
    duckdb_path: str
    remote_url: str
    remote_api_key: str
    remote_timeout: float
    duckdb_tokens: dict[str, str]
    cors_origins: tuple[str, ...]
    log_level: str
    debug: bool


def _bool(nome: str, default: str) -> bool:
    return os.environ.get(nome, default).lower() == "true"


def _tokens(raw: str) -> dict[str, str]:
    """Formato: tok1=org1,tok2=org2."""
    tokens: dict[str, str] = {}
    for par in raw.split(","):
        if not par.strip():
            continue
        token, sep, organizacao = par.partition("=")
        if not sep or not token.strip() or not organizacao.strip():
            raise ValueError(f"ATELIE_DUCKDB_TOKENS invalido: {par.strip()!r}. Formato: token=organizacao")
        tokens[token.strip()] = organizacao.strip()
    return tokens


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    store = os.environ.get("ATELIE_STORE", "local").lower()
    if store not in STORES_VALIDOS:
        raise ValueError(f"ATELIE_STORE invalido: {store!r}. Valores aceitos: {STORES_VALIDOS}")
    return Settings(
        store=store,
        local_path=os.environ.get("ATELIE_LOCAL_PATH", "atelie_dados.json"),
        seed_servicos=_bool("ATELIE_SEED_SERVICOS", "true"),
        duckdb_path=os.environ.get("DUCKDB_PATH", ":memory:"),
        remote_url=os.environ.get("ATELIE_REMOTE_URL", ""),
        remote_api_key=os.environ.get("ATELIE_REMOTE_API_KEY", ""),
        remote_timeout=float(os.environ.get("ATELIE_REMOTE_TIMEOUT", "10")),
        duckdb_tokens=_tokens(os.environ.get("ATELIE_DUCKDB_TOKENS", "")),
        cors_origins=tuple(
            o.strip()
            for o in os.environ.get("API_CORS_ORIGINS", "http://localhost:5173").split(",")
            if o.strip()
        ),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        debug=_bool("API_DEBUG", "false"),
    )
