# atelie/domain/cliente/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..value_objects import data_obrigatoria, texto_obrigatorio, texto_opcional


@dataclass(frozen=True)
class Cliente:
    """Cadastro de cliente. data_cadastro e fixada na criacao e nunca muda."""

    id: str
    nome: str
    telefone: str
    data_cadastro: datetime
    email: str | None = None
    endereco: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "nome", texto_obrigatorio(self.nome, "nome"))
        object.__setattr__(self, "telefone", texto_obrigatorio(self.telefone, "telefone"))
        object.__setattr__(self, "email", texto_opcional(self.email))
        object.__setattr__(self, "endereco", texto_opcional(self.endereco))
        object.__setattr__(self, "data_cadastro", data_obrigatoria(self.data_cadastro, "data_cadastro"))
