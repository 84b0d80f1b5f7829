# atelie/application/dtos/financeiro_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from atelie.application.services.agregacao import TotaisFinanceiros, formatar_valor
from atelie.domain.financeiro.entities import Baixa, ContaFinanceira
from atelie.domain.financeiro.enums import TipoConta

from ._tipos import Texto, Valor, iso
from .caixa_dto import MovimentoDTO


class ContaDTO(BaseModel):
    id: str
    tipo: str
    descricao: str
    valor: str
    data_vencimento: str
    status: str
    data_pagamento: str | None
    ordem_servico_id: str | None
    vencida: bool

    @classmethod
    def from_domain(cls, conta: ContaFinanceira, vencida: bool) -> ContaDTO:
        return cls(
            id=conta.id,
            tipo=conta.tipo.value,
            descricao=conta.descricao,
            valor=formatar_valor(conta.valor),
            data_vencimento=iso(conta.data_vencimento) or "",
            status=conta.status.value,
            data_pagamento=iso(conta.data_pagamento),
            ordem_servico_id=conta.ordem_servico_id,
            vencida=vencida,
        )


class ContaCriarDTO(BaseModel):
    tipo: TipoConta
    descricao: Texto
    valor: Valor
    data_vencimento: datetime
    ordem_servico_id: str | None = None


class ContaAtualizarDTO(BaseModel):
    tipo: TipoConta | None = None
    descricao: Texto | None = None
    data_vencimento: datetime | None = None
    ordem_servico_id: str | None = None


class BaixaDTO(BaseModel):
    conta: ContaDTO
    movimento: MovimentoDTO

    @classmethod
    def from_domain(cls, baixa: Baixa) -> BaixaDTO:
        return cls(
            conta=ContaDTO.from_domain(baixa.conta, vencida=False),
            movimento=MovimentoDTO.from_domain(baixa.movimento),
        )


class TotaisDTO(BaseModel):
    receber: str
    pagar: str

    @classmethod
    def from_domain(cls, totais: TotaisFinanceiros) -> TotaisDTO:
        return cls(receber=formatar_valor(totais.receber), pagar=formatar_valor(totais.pagar))


class ResumoContasDTO(BaseModel):
    pendentes: TotaisDTO
    vencidas: TotaisDTO
    qtd_vencidas: int
