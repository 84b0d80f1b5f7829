# atelie/domain/ordem/entities.py
from __future__ import annotations

from dataclasses import dataclass, field
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
from .enums import StatusOrdem


@dataclass(frozen=True)
class ItemOrdem:
    """Linha da ordem: servico x quantidade, com snapshot do preco unitario.

    valor_total = quantidade * valor_unitario, fixado quando a linha e criada.
    """

    servico_id: str
    quantidade: int
    valor_unitario: Decimal
    valor_total: Decimal = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "servico_id", texto_obrigatorio(self.servico_id, "servico_id"))
        if isinstance(self.quantidade, bool) or not isinstance(self.quantidade, int):
            raise ErroValidacao(f"quantidade invalida: {self.quantidade!r}")
        if self.quantidade < 1:
            raise ErroValidacao("quantidade deve ser >= 1")
        unitario = valor_monetario(self.valor_unitario, "valor_unitario")
        object.__setattr__(self, "valor_unitario", unitario)
        object.__setattr__(self, "valor_total", unitario * self.quantidade)


@dataclass(frozen=True)
class OrdemServico:
    """Ordem de servico. valor_total e DERIVADO dos itens; quem mantem o
    invariante e a SessaoCRM, que recalcula a cada mutacao de itens."""

    id: str
    cliente_id: str
    data_abertura: datetime
    itens: tuple[ItemOrdem, ...] = ()
    valor_total: Decimal = Decimal("0")
    status: StatusOrdem = StatusOrdem.PENDENTE
    data_prevista: datetime | None = None
    data_conclusao: datetime | None = None  # so preenchida pelo chamador
    observacoes: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "cliente_id", texto_obrigatorio(self.cliente_id, "cliente_id"))
        object.__setattr__(self, "itens", tuple(self.itens))
        object.__setattr__(self, "valor_total", valor_monetario(self.valor_total, "valor_total"))
        try:
            object.__setattr__(self, "status", StatusOrdem(self.status))
        except ValueError as err:
            raise ErroValidacao(f"status de ordem invalido: {self.status!r}") from err
        object.__setattr__(self, "observacoes", texto_opcional(self.observacoes))
        object.__setattr__(self, "data_abertura", data_obrigatoria(self.data_abertura, "data_abertura"))
        object.__setattr__(self, "data_prevista", data_opcional(self.data_prevista, "data_prevista"))
        object.__setattr__(self, "data_conclusao", data_opcional(self.data_conclusao, "data_conclusao"))
