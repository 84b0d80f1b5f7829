# atelie/interfaces/api/routes/sessao_routes.py
from fastapi import APIRouter, Depends, HTTPException, Response

from atelie.application.dtos.sessao_dto import AbrirSessaoDTO, SessaoDTO
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.infrastructure.sessoes import RegistroSessoes
from atelie.interfaces.api.dependencies import get_registro, get_sessao, get_token

router = APIRouter()


def _sessao_dto(sessao: SessaoCRM) -> SessaoDTO:
    return SessaoDTO(
        carregada=sessao.carregada,
        desatualizadas=sorted(t.value for t in sessao.desatualizadas),
        clientes=len(sessao.clientes),
        servicos=len(sessao.servicos),
        ordens=len(sessao.ordens),
        contas=len(sessao.contas),
        movimentos=len(sessao.movimentos),
    )


@router.post("/sessao", response_model=SessaoDTO, status_code=201)
def abrir_sessao(
    dto: AbrirSessaoDTO,
    registro: RegistroSessoes = Depends(get_registro),  # noqa: B008
) -> SessaoDTO:
    return _sessao_dto(registro.abrir(dto.access_token, dto.organizacao_id))


@router.get("/sessao", response_model=SessaoDTO)
def get_sessao_atual(
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> SessaoDTO:
    return _sessao_dto(sessao)


@router.post("/sessao/recarregar", response_model=SessaoDTO)
def recarregar_sessao(
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> SessaoDTO:
    sessao.recarregar()
    return _sessao_dto(sessao)


@router.delete("/sessao", status_code=204)
def encerrar_sessao(
    token: str = Depends(get_token),  # noqa: B008
    registro: RegistroSessoes = Depends(get_registro),  # noqa: B008
) -> Response:
    if not registro.encerrar(token):
        raise HTTPException(status_code=401, detail="Sessao nao encontrada")
    return Response(status_code=204)
