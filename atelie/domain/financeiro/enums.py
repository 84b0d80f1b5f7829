# atelie/domain/financeiro/enums.py
from __future__ import annotations

from enum import Enum


class TipoConta(str, Enum):
    PAGAR = "pagar"
    RECEBER = "receber"


class StatusConta(str, Enum):
    PENDENTE = "pendente"
    PAGA = "paga"


class TipoMovimento(str, Enum):
    ENTRADA = "entrada"
    SAIDA = "saida"


class Periodo(str, Enum):
    HOJE = "hoje"
    SEMANA = "semana"  # janela movel de 7x24h, nao semana de calendario
    MES = "mes"
    ANO = "ano"


# Baixa de conta: receber vira entrada, pagar vira saida.
MOVIMENTO_DA_BAIXA: dict[TipoConta, TipoMovimento] = {
    TipoConta.RECEBER: TipoMovimento.ENTRADA,
    TipoConta.PAGAR: TipoMovimento.SAIDA,
}

CATEGORIA_DA_BAIXA: dict[TipoConta, str] = {
    TipoConta.RECEBER: "Recebimento",
    TipoConta.PAGAR: "Pagamento",
}
