# atelie/interfaces/api/routes/conta_routes.py
from fastapi import APIRouter, Depends, Query, Response

from atelie.application.dtos.financeiro_dto import (
    BaixaDTO,
    ContaAtualizarDTO,
    ContaCriarDTO,
    ContaDTO,
    ResumoContasDTO,
    TotaisDTO,
)
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.domain.financeiro.enums import Periodo, StatusConta, TipoConta
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


@router.get("/contas", response_model=list[ContaDTO])
def listar_contas(
    termo: str | None = Query(default=None, max_length=100),
    tipo: TipoConta | None = Query(default=None),
    status: StatusConta | None = Query(default=None),
    periodo: Periodo | None = Query(default=None),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> list[ContaDTO]:
    agora = sessao.agora()
    contas = sessao.buscar_contas(termo, tipo, status, periodo, agora)
    return [ContaDTO.from_domain(c, sessao.esta_vencida(c, agora)) for c in contas]


@router.get("/contas/resumo", response_model=ResumoContasDTO)
def resumo_contas(
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ResumoContasDTO:
    agora = sessao.agora()
    return ResumoContasDTO(
        pendentes=TotaisDTO.from_domain(sessao.totais_pendentes()),
        vencidas=TotaisDTO.from_domain(sessao.totais_vencidos(agora)),
        qtd_vencidas=len(sessao.contas_vencidas(agora)),
    )


@router.get("/contas/{conta_id}", response_model=ContaDTO)
def obter_conta(
    conta_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ContaDTO:
    conta = sessao.obter_conta(conta_id)
    return ContaDTO.from_domain(conta, sessao.esta_vencida(conta))


@router.post("/contas", response_model=ContaDTO, status_code=201)
def criar_conta(
    dto: ContaCriarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ContaDTO:
    conta = sessao.adicionar_conta(
        dto.tipo, dto.descricao, dto.valor, dto.data_vencimento, dto.ordem_servico_id,
    )
    return ContaDTO.from_domain(conta, sessao.esta_vencida(conta))


@router.patch("/contas/{conta_id}", response_model=ContaDTO)
def atualizar_conta(
    conta_id: str,
    dto: ContaAtualizarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ContaDTO:
    conta = sessao.atualizar_conta(conta_id, **dto.model_dump(exclude_unset=True))
    return ContaDTO.from_domain(conta, sessao.esta_vencida(conta))


@router.delete("/contas/{conta_id}", status_code=204)
def excluir_conta(
    conta_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> Response:
    sessao.excluir_conta(conta_id)
    return Response(status_code=204)


@router.post("/contas/{conta_id}/pagar", response_model=BaixaDTO)
def pagar_conta(
    conta_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> BaixaDTO:
    return BaixaDTO.from_domain(sessao.marcar_conta_paga(conta_id))
