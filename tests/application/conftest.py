# tests/application/conftest.py
from __future__ import annotations

from collections.abc import Generator, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import duckdb
import pytest

from atelie.application.services.sessao_crm import SessaoCRM
from atelie.domain.registros import RecordStore, Registro, TipoRegistro
from atelie.infrastructure.duckdb_connection import criar_schema
from atelie.infrastructure.stores.duckdb_store import DuckDBRecordStore
from atelie.infrastructure.stores.local_store import LocalRecordStore


class Relogio:
    """Relogio controlavel injetado na sessao."""

    def __init__(self, agora: datetime) -> None:
        self.agora = agora

    def __call__(self) -> datetime:
        return self.agora


class StoreSemTransacao:
    """Delegacao explicita (sem transacao()), como o store remoto.

    Os ganchos permitem injetar falhas ou efeitos no meio de uma operacao.
    """

    def __init__(self, interno: RecordStore) -> None:
        self.interno = interno
        self.antes_de_inserir: dict[TipoRegistro, Any] = {}
        self.antes_de_atualizar: list[Any] = []
        self.ao_listar_clientes: Any = None

    def listar_clientes(self) -> list[Any]:
        clientes = self.interno.listar_clientes()
        if self.ao_listar_clientes:
            self.ao_listar_clientes()
        return clientes

    def listar_servicos(self) -> list[Any]:
        return self.interno.listar_servicos()

    def listar_ordens(self) -> list[Any]:
        return self.interno.listar_ordens()

    def listar_contas(self) -> list[Any]:
        return self.interno.listar_contas()

    def listar_movimentos(self) -> list[Any]:
        return self.interno.listar_movimentos()

    def inserir(self, tipo: TipoRegistro, registro: Registro) -> Registro:
        gancho = self.antes_de_inserir.get(tipo)
        if gancho:
            gancho()
        return self.interno.inserir(tipo, registro)

    def atualizar(self, tipo: TipoRegistro, id: str, campos: Mapping[str, Any]) -> Registro:
        if self.antes_de_atualizar:
            gancho = self.antes_de_atualizar.pop(0)
            if gancho:
                gancho()
        return self.interno.atualizar(tipo, id, campos)

    def excluir(self, tipo: TipoRegistro, id: str) -> None:
        self.interno.excluir(tipo, id)


@pytest.fixture
def relogio() -> Relogio:
    return Relogio(datetime(2026, 3, 10, 14, 30))


@pytest.fixture
def local_store(tmp_path: Path) -> LocalRecordStore:
    return LocalRecordStore(tmp_path / "atelie.json", semear_servicos=False)


@pytest.fixture
def duckdb_conn() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    conn = duckdb.connect(":memory:")
    criar_schema(conn)
    yield conn
    conn.close()


@pytest.fixture(params=["local", "duckdb"])
def store(
    request: pytest.FixtureRequest,
    tmp_path: Path,
    duckdb_conn: duckdb.DuckDBPyConnection,
) -> RecordStore:
    if request.param == "local":
        return LocalRecordStore(tmp_path / "atelie.json", semear_servicos=False)
    return DuckDBRecordStore(duckdb_conn, "org-teste")


@pytest.fixture
def sessao(store: RecordStore, relogio: Relogio) -> SessaoCRM:
    s = SessaoCRM(store, relogio=relogio)
    s.carregar()
    return s


@pytest.fixture
def store_sem_transacao(local_store: LocalRecordStore) -> StoreSemTransacao:
    return StoreSemTransacao(local_store)
