# atelie/interfaces/api/routes/caixa_routes.py
from fastapi import APIRouter, Depends, Query

from atelie.application.dtos.caixa_dto import (
    MovimentoCriarDTO,
    MovimentoDTO,
    ResumoCaixaDTO,
    SaldoDTO,
)
from atelie.application.services.agregacao import formatar_valor
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.domain.financeiro.enums import Periodo, TipoMovimento
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


@router.get("/caixa/movimentos", response_model=list[MovimentoDTO])
def listar_movimentos(
    termo: str | None = Query(default=None, max_length=100),
    tipo: TipoMovimento | None = Query(default=None),
    categoria: str | None = Query(default=None),
    periodo: Periodo | None = Query(default=None),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> list[MovimentoDTO]:
    movimentos = sessao.buscar_movimentos(termo, tipo, categoria, periodo)
    return [MovimentoDTO.from_domain(m) for m in movimentos]


@router.post("/caixa/movimentos", response_model=MovimentoDTO, status_code=201)
def lancar_movimento(
    dto: MovimentoCriarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> MovimentoDTO:
    movimento = sessao.adicionar_movimento(dto.tipo, dto.valor, dto.descricao, dto.categoria, dto.data)
    return MovimentoDTO.from_domain(movimento)


@router.get("/caixa/saldo", response_model=SaldoDTO)
def saldo_caixa(
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> SaldoDTO:
    return SaldoDTO(saldo=formatar_valor(sessao.saldo_caixa))


@router.get("/caixa/resumo", response_model=ResumoCaixaDTO)
def resumo_caixa(
    periodo: Periodo = Query(default=Periodo.MES),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ResumoCaixaDTO:
    return ResumoCaixaDTO.from_domain(sessao.resumo_caixa(periodo), periodo)
