# atelie/application/dtos/caixa_dto.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from atelie.application.services.agregacao import ResumoCaixa, formatar_valor
from atelie.domain.financeiro.entities import MovimentoCaixa
from atelie.domain.financeiro.enums import Periodo, TipoMovimento

from ._tipos import Texto, Valor, iso


class MovimentoDTO(BaseModel):
    id: str
    tipo: str
    valor: str
    descricao: str
    data: str
    categoria: str

    @classmethod
    def from_domain(cls, movimento: MovimentoCaixa) -> MovimentoDTO:
        return cls(
            id=movimento.id,
            tipo=movimento.tipo.value,
            valor=formatar_valor(movimento.valor),
            descricao=movimento.descricao,
            data=iso(movimento.data) or "",
            categoria=movimento.categoria,
        )


class MovimentoCriarDTO(BaseModel):
    tipo: TipoMovimento
    valor: Valor
    descricao: Texto
    categoria: Texto
    data: datetime | None = None


class SaldoDTO(BaseModel):
    saldo: str


class ResumoCaixaDTO(BaseModel):
    periodo: str
    entradas: str
    saidas: str
    saldo: str
    qtd_entradas: int
    qtd_saidas: int

    @classmethod
    def from_domain(cls, resumo: ResumoCaixa, periodo: Periodo) -> ResumoCaixaDTO:
        return cls(
            periodo=periodo.value,
            entradas=formatar_valor(resumo.entradas),
            saidas=formatar_valor(resumo.saidas),
            saldo=formatar_valor(resumo.saldo),
            qtd_entradas=resumo.qtd_entradas,
            qtd_saidas=resumo.qtd_saidas,
        )
