# atelie/interfaces/api/routes/cliente_routes.py
from fastapi import APIRouter, Depends, Query, Response

from atelie.application.dtos.cliente_dto import ClienteAtualizarDTO, ClienteCriarDTO, ClienteDTO
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


@router.get("/clientes", response_model=list[ClienteDTO])
def listar_clientes(
    termo: str | None = Query(default=None, max_length=100),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> list[ClienteDTO]:
    return [ClienteDTO.from_domain(c) for c in sessao.buscar_clientes(termo)]


@router.get("/clientes/{cliente_id}", response_model=ClienteDTO)
def obter_cliente(
    cliente_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ClienteDTO:
    return ClienteDTO.from_domain(sessao.obter_cliente(cliente_id))


@router.post("/clientes", response_model=ClienteDTO, status_code=201)
def criar_cliente(
    dto: ClienteCriarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ClienteDTO:
    cliente = sessao.adicionar_cliente(dto.nome, dto.telefone, dto.email, dto.endereco)
    return ClienteDTO.from_domain(cliente)


@router.patch("/clientes/{cliente_id}", response_model=ClienteDTO)
def atualizar_cliente(
    cliente_id: str,
    dto: ClienteAtualizarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> ClienteDTO:
    cliente = sessao.atualizar_cliente(cliente_id, **dto.model_dump(exclude_unset=True))
    return ClienteDTO.from_domain(cliente)


@router.delete("/clientes/{cliente_id}", status_code=204)
def excluir_cliente(
    cliente_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> Response:
    sessao.excluir_cliente(cliente_id)
    return Response(status_code=204)
