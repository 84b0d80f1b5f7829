# tests/integration/test_api_cadastros.py
from fastapi.testclient import TestClient


def test_criar_e_listar_clientes_ordenados(client: TestClient, auth: dict[str, str]) -> None:
    client.post("/api/clientes", json={"nome": "Bia", "telefone": "1"}, headers=auth)
    response = client.post(
        "/api/clientes", json={"nome": "Ana", "telefone": "2", "email": "ana@example.com"}, headers=auth,
    )
    assert response.status_code == 201
    assert response.json()["email"] == "ana@example.com"

    nomes = [c["nome"] for c in client.get("/api/clientes", headers=auth).json()]
    assert nomes == ["Ana", "Bia"]


def test_cliente_nome_vazio_retorna_422(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post("/api/clientes", json={"nome": "", "telefone": "1"}, headers=auth)
    assert response.status_code == 422


def test_cliente_nome_so_espacos_retorna_422(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post("/api/clientes", json={"nome": "   ", "telefone": "1"}, headers=auth)
    assert response.status_code == 422


def test_atualizar_cliente_parcial(client: TestClient, auth: dict[str, str]) -> None:
    criado = client.post(
        "/api/clientes", json={"nome": "Ana", "telefone": "1", "endereco": "Rua A"}, headers=auth,
    ).json()
    response = client.patch(f"/api/clientes/{criado['id']}", json={"telefone": "2"}, headers=auth)
    assert response.status_code == 200
    data = response.json()
    assert data["telefone"] == "2"
    assert data["endereco"] == "Rua A"
    assert data["data_cadastro"] == criado["data_cadastro"]


def test_cliente_inexistente_retorna_404(client: TestClient, auth: dict[str, str]) -> None:
    assert client.get("/api/clientes/nao-existe", headers=auth).status_code == 404
    assert client.patch("/api/clientes/nao-existe", json={"nome": "X"}, headers=auth).status_code == 404
    assert client.delete("/api/clientes/nao-existe", headers=auth).status_code == 404


def test_excluir_cliente(client: TestClient, auth: dict[str, str]) -> None:
    criado = client.post("/api/clientes", json={"nome": "Ana", "telefone": "1"}, headers=auth).json()
    assert client.delete(f"/api/clientes/{criado['id']}", headers=auth).status_code == 204
    assert client.get("/api/clientes", headers=auth).json() == []


def test_servico_valor_como_string_com_duas_casas(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post(
        "/api/servicos", json={"nome": "Bainha Simples", "tipo": "Ajuste", "valor": "15"}, headers=auth,
    )
    assert response.status_code == 201
    assert response.json()["valor"] == "15.00"


def test_servico_valor_negativo_retorna_422(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post(
        "/api/servicos", json={"nome": "Bainha", "tipo": "Ajuste", "valor": "-1"}, headers=auth,
    )
    assert response.status_code == 422


def test_atualizar_servico(client: TestClient, auth: dict[str, str]) -> None:
    criado = client.post(
        "/api/servicos", json={"nome": "Bainha", "tipo": "Ajuste", "valor": "15.00"}, headers=auth,
    ).json()
    response = client.patch(f"/api/servicos/{criado['id']}", json={"valor": "18.5"}, headers=auth)
    assert response.json()["valor"] == "18.50"
    assert response.json()["nome"] == "Bainha"


def test_buscar_clientes_por_termo(client: TestClient, auth: dict[str, str]) -> None:
    client.post("/api/clientes", json={"nome": "Ana", "telefone": "11 99999-0000"}, headers=auth)
    client.post(
        "/api/clientes", json={"nome": "Bia", "telefone": "21 98888", "email": "bia@example.com"}, headers=auth,
    )

    def nomes(termo: str) -> list[str]:
        resposta = client.get("/api/clientes", params={"termo": termo}, headers=auth)
        assert resposta.status_code == 200
        return [c["nome"] for c in resposta.json()]

    assert nomes("ANA") == ["Ana"]
    assert nomes("98888") == ["Bia"]
    assert nomes("example") == ["Bia"]
    assert nomes("ninguem") == []


def test_buscar_servicos_por_nome_ou_tipo(client: TestClient, auth: dict[str, str]) -> None:
    client.post("/api/servicos", json={"nome": "Bainha Simples", "tipo": "Ajuste", "valor": "15"}, headers=auth)
    client.post("/api/servicos", json={"nome": "Troca de Ziper", "tipo": "Conserto", "valor": "25"}, headers=auth)

    por_tipo = client.get("/api/servicos", params={"termo": "conserto"}, headers=auth).json()
    assert [s["nome"] for s in por_tipo] == ["Troca de Ziper"]
    assert len(client.get("/api/servicos", headers=auth).json()) == 2
