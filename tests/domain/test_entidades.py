# tests/domain/test_entidades.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from atelie.domain.cliente.entities import Cliente
from atelie.domain.erros import ErroValidacao
from atelie.domain.financeiro.entities import ContaFinanceira, MovimentoCaixa
from atelie.domain.financeiro.enums import StatusConta, TipoConta, TipoMovimento
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.ordem.enums import StatusOrdem
from atelie.domain.servico.entities import Servico
from atelie.domain.value_objects import valor_monetario

AGORA = datetime(2026, 3, 10, 14, 30)


def test_item_calcula_valor_total():
    item = ItemOrdem(servico_id="s1", quantidade=2, valor_unitario=Decimal("15.00"))
    assert item.valor_total == Decimal("30.00")


def test_item_quantidade_zero_invalida():
    with pytest.raises(ErroValidacao, match="quantidade"):
        ItemOrdem(servico_id="s1", quantidade=0, valor_unitario=Decimal("15.00"))


def test_item_quantidade_booleana_invalida():
    with pytest.raises(ErroValidacao):
        ItemOrdem(servico_id="s1", quantidade=True, valor_unitario=Decimal("15.00"))  # type: ignore[arg-type]


def test_item_valor_negativo_invalido():
    with pytest.raises(ErroValidacao, match="negativo"):
        ItemOrdem(servico_id="s1", quantidade=1, valor_unitario=Decimal("-0.01"))


def test_valor_monetario_float_nao_herda_erro_binario():
    assert valor_monetario(0.1) == Decimal("0.1")


@pytest.mark.parametrize("raw", ["abc", float("nan"), True, None])
def test_valor_monetario_invalido(raw: object):
    with pytest.raises(ErroValidacao):
        valor_monetario(raw)


def test_valor_monetario_zero_valido():
    assert valor_monetario("0") == Decimal("0")


def test_cliente_trima_campos_e_normaliza_opcionais_vazios():
    c = Cliente(id="c1", nome="  Ana  ", telefone=" 11 9999 ", data_cadastro=AGORA, email="  ")
    assert c.nome == "Ana"
    assert c.telefone == "11 9999"
    assert c.email is None


def test_cliente_nome_vazio_invalido():
    with pytest.raises(ErroValidacao, match="nome"):
        Cliente(id="c1", nome="   ", telefone="1199", data_cadastro=AGORA)


def test_cliente_data_com_fuso_vira_hora_local_sem_fuso():
    utc = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
    c = Cliente(id="c1", nome="Ana", telefone="1199", data_cadastro=utc)
    assert c.data_cadastro.tzinfo is None
    assert c.data_cadastro == utc.astimezone().replace(tzinfo=None)


def test_servico_valor_em_string_vira_decimal():
    s = Servico(id="s1", nome="Bainha", tipo="Ajuste", valor="15.00")  # type: ignore[arg-type]
    assert s.valor == Decimal("15.00")


def test_ordem_aceita_status_como_string():
    o = OrdemServico(id="o1", cliente_id="c1", data_abertura=AGORA, status="em_andamento")  # type: ignore[arg-type]
    assert o.status is StatusOrdem.EM_ANDAMENTO
    assert o.valor_total == Decimal("0")


def test_ordem_status_desconhecido_invalido():
    with pytest.raises(ErroValidacao, match="status"):
        OrdemServico(id="o1", cliente_id="c1", data_abertura=AGORA, status="arquivada")  # type: ignore[arg-type]


def test_ordem_sem_data_abertura_invalida():
    with pytest.raises(ErroValidacao, match="data_abertura"):
        OrdemServico(id="o1", cliente_id="c1", data_abertura=None)  # type: ignore[arg-type]


def test_conta_nasce_pendente():
    c = ContaFinanceira(
        id="f1", tipo="receber", descricao="Ordem 1", valor="30", data_vencimento=AGORA,  # type: ignore[arg-type]
    )
    assert c.tipo is TipoConta.RECEBER
    assert c.status is StatusConta.PENDENTE
    assert c.data_pagamento is None


def test_conta_tipo_invalido():
    with pytest.raises(ErroValidacao):
        ContaFinanceira(
            id="f1", tipo="doar", descricao="x", valor=Decimal("1"), data_vencimento=AGORA,  # type: ignore[arg-type]
        )


def test_movimento_categoria_obrigatoria():
    with pytest.raises(ErroValidacao, match="categoria"):
        MovimentoCaixa(
            id="m1", tipo=TipoMovimento.ENTRADA, valor=Decimal("10"),
            descricao="Venda", data=AGORA, categoria="",
        )


def test_movimento_data_naive_preservada():
    m = MovimentoCaixa(
        id="m1", tipo="saida", valor=Decimal("10"),  # type: ignore[arg-type]
        descricao="Linha", data=AGORA - timedelta(days=1), categoria="Material",
    )
    assert m.tipo is TipoMovimento.SAIDA
    assert m.data == datetime(2026, 3, 9, 14, 30)
