# atelie/domain/financeiro/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..erros import ErroValidacao
from ..value_objects import (
    data_obrigatoria,
    data_opcional,
    texto_obrigatorio,
    texto_opcional,
    valor_monetario,
)
from .enums import StatusConta, TipoConta, TipoMovimento


@dataclass(frozen=True)
class ContaFinanceira:
    """Conta a pagar ou a receber. valor e fixado na criacao.

    "Vencida" nao e estado persistido: e calculada na leitura (ver agregacao.esta_vencida).
    """

    id: str
    tipo: TipoConta
    descricao: str
    valor: Decimal
    data_vencimento: datetime
    status: StatusConta = StatusConta.PENDENTE
    data_pagamento: datetime | None = None
    ordem_servico_id: str | None = None  # pode apontar para ordem ja excluida

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "tipo", TipoConta(self.tipo))
            object.__setattr__(self, "status", StatusConta(self.status))
        except ValueError as err:
            raise ErroValidacao(f"tipo/status de conta invalido: {err}") from err
        object.__setattr__(self, "descricao", texto_obrigatorio(self.descricao, "descricao"))
        object.__setattr__(self, "valor", valor_monetario(self.valor))
        object.__setattr__(self, "ordem_servico_id", texto_opcional(self.ordem_servico_id))
        object.__setattr__(self, "data_vencimento", data_obrigatoria(self.data_vencimento, "data_vencimento"))
        object.__setattr__(self, "data_pagamento", data_opcional(self.data_pagamento, "data_pagamento"))


@dataclass(frozen=True)
class MovimentoCaixa:
    """Lancamento no caixa. Somente inclusao: nao ha edicao nem exclusao.
    O saldo nunca e armazenado, sempre recalculado do conjunto completo."""

    id: str
    tipo: TipoMovimento
    valor: Decimal
    descricao: str
    data: datetime
    categoria: str

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "tipo", TipoMovimento(self.tipo))
        except ValueError as err:
            raise ErroValidacao(f"tipo de movimento invalido: {self.tipo!r}") from err
        object.__setattr__(self, "valor", valor_monetario(self.valor))
        object.__setattr__(self, "descricao", texto_obrigatorio(self.descricao, "descricao"))
        object.__setattr__(self, "categoria", texto_obrigatorio(self.categoria, "categoria"))
        object.__setattr__(self, "data", data_obrigatoria(self.data, "data"))


@dataclass(frozen=True)
class Baixa:
    """Resultado de marcar uma conta como paga: a conta atualizada e o movimento gerado."""

    conta: ContaFinanceira
    movimento: MovimentoCaixa
