# atelie/application/dtos/ordem_dto.py
from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, Field

from atelie.application.services.agregacao import formatar_valor
from atelie.domain.cliente.entities import Cliente
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.ordem.enums import StatusOrdem

from ._tipos import Texto, Valor, iso
from .cliente_dto import ClienteDTO


class ItemOrdemDTO(BaseModel):
    servico_id: str
    servico_nome: str | None  # None quando o servico foi excluido do catalogo
    quantidade: int
    valor_unitario: str
    valor_total: str

    @classmethod
    def from_domain(cls, item: ItemOrdem, servico_nome: str | None) -> ItemOrdemDTO:
        return cls(
            servico_id=item.servico_id,
            servico_nome=servico_nome,
            quantidade=item.quantidade,
            valor_unitario=formatar_valor(item.valor_unitario),
            valor_total=formatar_valor(item.valor_total),
        )


class OrdemDTO(BaseModel):
    id: str
    cliente_id: str
    cliente: ClienteDTO | None
    itens: list[ItemOrdemDTO]
    valor_total: str
    status: str
    data_abertura: str
    data_prevista: str | None
    data_conclusao: str | None
    observacoes: str | None

    @classmethod
    def from_domain(
        cls,
        ordem: OrdemServico,
        cliente: Cliente | None,
        nomes_servico: Mapping[str, str],
    ) -> OrdemDTO:
        return cls(
            id=ordem.id,
            cliente_id=ordem.cliente_id,
            cliente=ClienteDTO.from_domain(cliente) if cliente else None,
            itens=[ItemOrdemDTO.from_domain(i, nomes_servico.get(i.servico_id)) for i in ordem.itens],
            valor_total=formatar_valor(ordem.valor_total),
            status=ordem.status.value,
            data_abertura=iso(ordem.data_abertura) or "",
            data_prevista=iso(ordem.data_prevista),
            data_conclusao=iso(ordem.data_conclusao),
            observacoes=ordem.observacoes,
        )


class ItemOrdemEntradaDTO(BaseModel):
    servico_id: Texto
    quantidade: int = Field(ge=1)
    valor_unitario: Valor | None = None  # None: preco atual do catalogo


class ItemOrdemAtualizarDTO(BaseModel):
    quantidade: int | None = Field(default=None, ge=1)
    valor_unitario: Valor | None = None


class OrdemCriarDTO(BaseModel):
    cliente_id: Texto
    itens: list[ItemOrdemEntradaDTO] = Field(default_factory=list)
    status: StatusOrdem = StatusOrdem.PENDENTE
    data_abertura: datetime | None = None
    data_prevista: datetime | None = None
    data_conclusao: datetime | None = None
    observacoes: str | None = None


class OrdemAtualizarDTO(BaseModel):
    cliente_id: Texto | None = None
    itens: list[ItemOrdemEntradaDTO] | None = None
    status: StatusOrdem | None = None
    data_abertura: datetime | None = None
    data_prevista: datetime | None = None
    data_conclusao: datetime | None = None
    observacoes: str | None = None
    carimbar_conclusao: bool = False
