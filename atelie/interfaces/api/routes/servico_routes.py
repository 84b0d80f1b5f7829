# atelie/interfaces/api/routes/servico_routes.py
from fastapi import APIRouter, Depends, Query, Response

from atelie.application.dtos.servico_dto import ServicoAtualizarDTO, ServicoCriarDTO, ServicoDTO
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


@router.get("/servicos", response_model=list[ServicoDTO])
def listar_servicos(
    termo: str | None = Query(default=None, max_length=100),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> list[ServicoDTO]:
    return [ServicoDTO.from_domain(s) for s in sessao.buscar_servicos(termo)]


@router.get("/servicos/{servico_id}", response_model=ServicoDTO)
def obter_servico(
    servico_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ServicoDTO:
    return ServicoDTO.from_domain(sessao.obter_servico(servico_id))


@router.post("/servicos", response_model=ServicoDTO, status_code=201)
def criar_servico(
    dto: ServicoCriarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ServicoDTO:
    servico = sessao.adicionar_servico(dto.nome, dto.tipo, dto.valor, dto.descricao)
    return ServicoDTO.from_domain(servico)


@router.patch("/servicos/{servico_id}", response_model=ServicoDTO)
def atualizar_servico(
    servico_id: str,
    dto: ServicoAtualizarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ServicoDTO:
    servico = sessao.atualizar_servico(servico_id, **dto.model_dump(exclude_unset=True))
    return ServicoDTO.from_domain(servico)


@router.delete("/servicos/{servico_id}", status_code=204)
def excluir_servico(
    servico_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> Response:
    sessao.excluir_servico(servico_id)
    return Response(status_code=204)
