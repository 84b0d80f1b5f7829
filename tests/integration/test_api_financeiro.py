# tests/integration/test_api_financeiro.py
from __future__ import annotations

from datetime import datetime, timedelta

from fastapi.testclient import TestClient


def _conta(client: TestClient, auth: dict[str, str], **extra: object) -> dict:
    corpo = {"tipo": "receber", "descricao": "Ordem da Ana", "valor": "30.00",
             "data_vencimento": (datetime.now() + timedelta(days=5)).isoformat()}
    corpo.update(extra)
    response = client.post("/api/contas", json=corpo, headers=auth)
    assert response.status_code == 201, response.text
    return response.json()


def test_fluxo_completo_ate_o_caixa(client: TestClient, auth: dict[str, str]) -> None:
    ana = client.post("/api/clientes", json={"nome": "Ana", "telefone": "1199"}, headers=auth).json()
    bainha = client.post(
        "/api/servicos", json={"nome": "Bainha Simples", "tipo": "Ajuste", "valor": "15.00"}, headers=auth,
    ).json()
    ordem = client.post(
        "/api/ordens",
        json={"cliente_id": ana["id"], "itens": [{"servico_id": bainha["id"], "quantidade": 2}]},
        headers=auth,
    ).json()
    conta = _conta(client, auth, valor=ordem["valor_total"], ordem_servico_id=ordem["id"])

    resumo = client.get("/api/contas/resumo", headers=auth).json()
    assert resumo["pendentes"]["receber"] == "30.00"

    response = client.post(f"/api/contas/{conta['id']}/pagar", headers=auth)
    assert response.status_code == 200
    baixa = response.json()
    assert baixa["conta"]["status"] == "paga"
    assert baixa["movimento"]["tipo"] == "entrada"
    assert baixa["movimento"]["valor"] == "30.00"
    assert baixa["movimento"]["categoria"] == "Recebimento"

    assert client.get("/api/caixa/saldo", headers=auth).json() == {"saldo": "30.00"}
    resumo = client.get("/api/contas/resumo", headers=auth).json()
    assert resumo["pendentes"]["receber"] == "0.00"


def test_pagar_duas_vezes_retorna_409(client: TestClient, auth: dict[str, str]) -> None:
    conta = _conta(client, auth)
    assert client.post(f"/api/contas/{conta['id']}/pagar", headers=auth).status_code == 200
    assert client.post(f"/api/contas/{conta['id']}/pagar", headers=auth).status_code == 409
    assert len(client.get("/api/caixa/movimentos", headers=auth).json()) == 1


def test_pagar_conta_inexistente_retorna_404(client: TestClient, auth: dict[str, str]) -> None:
    assert client.post("/api/contas/nao-existe/pagar", headers=auth).status_code == 404


def test_conta_vencida_sinalizada(client: TestClient, auth: dict[str, str]) -> None:
    ontem = (datetime.now() - timedelta(days=1)).isoformat()
    conta = _conta(client, auth, tipo="pagar", descricao="Aluguel", data_vencimento=ontem)
    assert conta["vencida"] is True

    resumo = client.get("/api/contas/resumo", headers=auth).json()
    assert resumo["vencidas"]["pagar"] == "30.00"
    assert resumo["qtd_vencidas"] == 1

    client.post(f"/api/contas/{conta['id']}/pagar", headers=auth)
    paga = client.get(f"/api/contas/{conta['id']}", headers=auth).json()
    assert paga["vencida"] is False
    assert client.get("/api/caixa/saldo", headers=auth).json() == {"saldo": "-30.00"}


def test_filtros_de_contas(client: TestClient, auth: dict[str, str]) -> None:
    _conta(client, auth, tipo="pagar", descricao="Aluguel")
    _conta(client, auth, tipo="receber", descricao="Ordem da Bia")

    pagar = client.get("/api/contas", params={"tipo": "pagar"}, headers=auth).json()
    assert [c["descricao"] for c in pagar] == ["Aluguel"]

    busca = client.get("/api/contas", params={"termo": "bia"}, headers=auth).json()
    assert [c["descricao"] for c in busca] == ["Ordem da Bia"]

    assert client.get("/api/contas", params={"status": "paga"}, headers=auth).json() == []
    assert client.get("/api/contas", params={"tipo": "doar"}, headers=auth).status_code == 422


def test_conta_nao_aceita_mudar_valor(client: TestClient, auth: dict[str, str]) -> None:
    conta = _conta(client, auth)
    response = client.patch(f"/api/contas/{conta['id']}", json={"descricao": "Ajuste"}, headers=auth)
    assert response.status_code == 200
    assert response.json()["descricao"] == "Ajuste"
    assert response.json()["valor"] == "30.00"

    # campo fora do DTO e ignorado; o valor continua o mesmo
    response = client.patch(f"/api/contas/{conta['id']}", json={"valor": "1.00"}, headers=auth)
    assert response.json()["valor"] == "30.00"


def test_excluir_conta(client: TestClient, auth: dict[str, str]) -> None:
    conta = _conta(client, auth)
    assert client.delete(f"/api/contas/{conta['id']}", headers=auth).status_code == 204
    assert client.get(f"/api/contas/{conta['id']}", headers=auth).status_code == 404


def test_lancamento_manual_e_resumo_do_caixa(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post(
        "/api/caixa/movimentos",
        json={"tipo": "entrada", "valor": "100", "descricao": "Ajuste avulso", "categoria": "Vendas"},
        headers=auth,
    )
    assert response.status_code == 201
    client.post(
        "/api/caixa/movimentos",
        json={"tipo": "saida", "valor": "40.5", "descricao": "Linhas", "categoria": "Material"},
        headers=auth,
    )

    resumo = client.get("/api/caixa/resumo", params={"periodo": "hoje"}, headers=auth).json()
    assert resumo == {
        "periodo": "hoje", "entradas": "100.00", "saidas": "40.50", "saldo": "59.50",
        "qtd_entradas": 1, "qtd_saidas": 1,
    }

    material = client.get("/api/caixa/movimentos", params={"termo": "material"}, headers=auth).json()
    assert [m["descricao"] for m in material] == ["Linhas"]


def test_movimento_sem_categoria_retorna_422(client: TestClient, auth: dict[str, str]) -> None:
    response = client.post(
        "/api/caixa/movimentos",
        json={"tipo": "entrada", "valor": "10", "descricao": "x"},
        headers=auth,
    )
    assert response.status_code == 422


def test_resumo_do_painel(client: TestClient, auth: dict[str, str]) -> None:
    ana = client.post("/api/clientes", json={"nome": "Ana", "telefone": "1"}, headers=auth).json()
    bainha = client.post(
        "/api/servicos", json={"nome": "Bainha", "tipo": "Ajuste", "valor": "15.00"}, headers=auth,
    ).json()
    ordem = client.post(
        "/api/ordens",
        json={"cliente_id": ana["id"], "itens": [{"servico_id": bainha["id"], "quantidade": 2}]},
        headers=auth,
    ).json()
    client.patch(f"/api/ordens/{ordem['id']}", json={"status": "concluida"}, headers=auth)
    _conta(client, auth)

    resumo = client.get("/api/resumo", headers=auth).json()
    assert resumo["total_clientes"] == 1
    assert resumo["total_servicos"] == 1
    assert resumo["ordens"]["concluidas"] == 1
    assert resumo["receita"] == "30.00"
    assert resumo["saldo_caixa"] == "0.00"
    assert resumo["pendentes"]["receber"] == "30.00"
