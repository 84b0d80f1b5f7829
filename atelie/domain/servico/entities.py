# atelie/domain/servico/entities.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..value_objects import texto_obrigatorio, texto_opcional, valor_monetario


@dataclass(frozen=True)
class Servico:
    """Item do catalogo. Alterar o preco aqui nao afeta ordens ja abertas."""

    id: str
    nome: str
    tipo: str  # categoria: Ajuste, Conserto, Confeccao...
    valor: Decimal
    descricao: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "nome", texto_obrigatorio(self.nome, "nome"))
        object.__setattr__(self, "tipo", texto_obrigatorio(self.tipo, "tipo"))
        object.__setattr__(self, "valor", valor_monetario(self.valor))
        object.__setattr__(self, "descricao", texto_opcional(self.descricao))
