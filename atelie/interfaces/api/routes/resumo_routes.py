# atelie/interfaces/api/routes/resumo_routes.py
from fastapi import APIRouter, Depends

from atelie.application.dtos.financeiro_dto import TotaisDTO
from atelie.application.dtos.resumo_dto import OrdensPorStatusDTO, ResumoDTO
from atelie.application.services.agregacao import formatar_valor
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


@router.get("/resumo", response_model=ResumoDTO)
def get_resumo(
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ResumoDTO:
    ordens = sessao.resumo_ordens()
    return ResumoDTO(
        total_clientes=len(sessao.clientes),
        total_servicos=len(sessao.servicos),
        total_ordens=len(sessao.ordens),
        ordens=OrdensPorStatusDTO(
            pendentes=ordens.pendentes,
            em_andamento=ordens.em_andamento,
            concluidas=ordens.concluidas,
            canceladas=ordens.canceladas,
        ),
        receita=formatar_valor(ordens.receita),
        saldo_caixa=formatar_valor(sessao.saldo_caixa),
        pendentes=TotaisDTO.from_domain(sessao.totais_pendentes()),
        vencidas=TotaisDTO.from_domain(sessao.totais_vencidos()),
    )
