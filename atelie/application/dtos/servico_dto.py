# atelie/application/dtos/servico_dto.py
from __future__ import annotations

from pydantic import BaseModel

from atelie.application.services.agregacao import formatar_valor
from atelie.domain.servico.entities import Servico

from ._tipos import Texto, Valor


class ServicoDTO(BaseModel):
    id: str
    nome: str
    tipo: str
    valor: str  # Decimal serializado como string
    descricao: str | None

    @classmethod
    def from_domain(cls, servico: Servico) -> ServicoDTO:
        return cls(
            id=servico.id,
            nome=servico.nome,
            tipo=servico.tipo,
            valor=formatar_valor(servico.valor),
            descricao=servico.descricao,
        )


class ServicoCriarDTO(BaseModel):
    nome: Texto
    tipo: Texto
    valor: Valor
    descricao: str | None = None


class ServicoAtualizarDTO(BaseModel):
    nome: Texto | None = None
    tipo: Texto | None = None
    valor: Valor | None = None
    descricao: str | None = None
