# tests/integration/conftest.py
from __future__ import annotations

import os
import uuid
from collections.abc import Generator

import duckdb
import pytest
from fastapi.testclient import TestClient

# Store DuckDB in-memory; cada teste abre a propria sessao numa organizacao nova
os.environ["ATELIE_STORE"] = "duckdb"
os.environ["DUCKDB_PATH"] = ":memory:"


@pytest.fixture(scope="session")
def test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """DuckDB in-memory com o schema do store."""
    from atelie.infrastructure.duckdb_connection import criar_schema

    conn = duckdb.connect(":memory:")
    criar_schema(conn)
    yield conn
    conn.close()


@pytest.fixture(scope="session")
def client(test_db: duckdb.DuckDBPyConnection) -> Generator[TestClient, None, None]:
    """TestClient do FastAPI com DuckDB in-memory injetado."""
    from atelie.infrastructure import duckdb_connection
    duckdb_connection.set_connection(test_db)

    # Limpar caches para pegar ATELIE_STORE=duckdb
    from atelie.infrastructure.config import get_settings
    get_settings.cache_clear()
    from atelie.interfaces.api.dependencies import get_registro
    get_registro.cache_clear()

    from atelie.interfaces.api.main import app
    with TestClient(app) as c:
        yield c
    duckdb_connection.set_connection(None)


@pytest.fixture
def auth(client: TestClient) -> dict[str, str]:
    """Abre uma sessao isolada (organizacao propria) e devolve o header Bearer."""
    token = f"tok-{uuid.uuid4()}"
    response = client.post("/api/sessao", json={"access_token": token, "organizacao_id": token})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {token}"}
