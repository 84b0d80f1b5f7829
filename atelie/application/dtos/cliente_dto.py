# atelie/application/dtos/cliente_dto.py
from __future__ import annotations

from pydantic import BaseModel

from atelie.domain.cliente.entities import Cliente

from ._tipos import Texto, iso


class ClienteDTO(BaseModel):
    id: str
    nome: str
    telefone: str
    email: str | None
    endereco: str | None
    data_cadastro: str

    @classmethod
    def from_domain(cls, cliente: Cliente) -> ClienteDTO:
        return cls(
            id=cliente.id,
            nome=cliente.nome,
            telefone=cliente.telefone,
            email=cliente.email,
            endereco=cliente.endereco,
            data_cadastro=iso(cliente.data_cadastro) or "",
        )


class ClienteCriarDTO(BaseModel):
    nome: Texto
    telefone: Texto
    email: str | None = None
    endereco: str | None = None


class ClienteAtualizarDTO(BaseModel):
    nome: Texto | None = None
    telefone: Texto | None = None
    email: str | None = None
    endereco: str | None = None
