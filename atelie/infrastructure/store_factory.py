# atelie/infrastructure/store_factory.py
#
# Monta o RecordStore de uma sessao a partir da config.
#
# Design decisions:
#   - local: um unico LocalRecordStore por arquivo. Duas sessoes sobre o mesmo
#     blob precisam compartilhar memoria e lock. Uso de usuario unico.
#   - duckdb: escopado por organizacao_id. Com ATELIE_DUCKDB_TOKENS configurado,
#     cada token so abre a organizacao vinculada a ele e token fora da lista e
#     recusado. Sem a lista, o modo e de desenvolvimento: qualquer token abre a
#     organizacao pedida (ou "default"), e o escopo nao e fronteira de seguranca.
#   - remote: o token vai para o servidor, que autoriza cada requisicao.
from __future__ import annotations

import threading

from atelie.domain.erros import AcessoNegado
from atelie.domain.registros import RecordStore

from .config import Settings
from .duckdb_connection import get_connection
from .stores.duckdb_store import DuckDBRecordStore
from .stores.local_store import LocalRecordStore
from .stores.postgrest_store import PostgrestRecordStore

ORGANIZACAO_PADRAO = "default"

_locais: dict[str, LocalRecordStore] = {}
_locais_lock = threading.Lock()


def criar_store(
    settings: Settings,
    access_token: str,
    organizacao_id: str | None = None,
) -> RecordStore:
    if settings.store == "local":
        with _locais_lock:
            store = _locais.get(settings.local_path)
            if store is None:
                store = LocalRecordStore(settings.local_path, semear_servicos=settings.seed_servicos)
                _locais[settings.local_path] = store
        return store
    if settings.store == "duckdb":
        organizacao = organizacao_do_token(settings, access_token, organizacao_id)
        return DuckDBRecordStore(get_connection(), organizacao)
    return PostgrestRecordStore(
        settings.remote_url,
        settings.remote_api_key,
        access_token,
        timeout=settings.remote_timeout,
    )


def organizacao_do_token(settings: Settings, access_token: str, organizacao_id: str | None) -> str:
    if not settings.duckdb_tokens:
        return organizacao_id or ORGANIZACAO_PADRAO
    vinculada = settings.duckdb_tokens.get(access_token)
    if vinculada is None:
        raise AcessoNegado("Token sem organizacao vinculada")
    if organizacao_id is not None and organizacao_id != vinculada:
        raise AcessoNegado(f"Token sem acesso a organizacao {organizacao_id}")
    return vinculada


def limpar_cache_local() -> None:
    """Usado em testes para trocar o arquivo entre casos."""
    with _locais_lock:
        _locais.clear()
