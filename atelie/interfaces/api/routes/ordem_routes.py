# atelie/interfaces/api/routes/ordem_routes.py
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from atelie.application.dtos.ordem_dto import (
    ItemOrdemAtualizarDTO,
    ItemOrdemEntradaDTO,
    OrdemAtualizarDTO,
    OrdemCriarDTO,
    OrdemDTO,
)
from atelie.application.services.sessao_crm import SessaoCRM
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.ordem.enums import StatusOrdem
from atelie.interfaces.api.dependencies import get_sessao

router = APIRouter()


def _ordem_dto(sessao: SessaoCRM, ordem: OrdemServico) -> OrdemDTO:
    nomes = {s.id: s.nome for s in sessao.servicos}
    return OrdemDTO.from_domain(ordem, sessao.cliente_da_ordem(ordem), nomes)


def _itens(sessao: SessaoCRM, itens: list[ItemOrdemEntradaDTO]) -> list[ItemOrdem]:
    return [sessao.novo_item(i.servico_id, i.quantidade, i.valor_unitario) for i in itens]


@router.get("/ordens", response_model=list[OrdemDTO])
def listar_ordens(
    termo: str | None = Query(default=None, max_length=100),
    status: StatusOrdem | None = Query(default=None),
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> list[OrdemDTO]:
    return [_ordem_dto(sessao, o) for o in sessao.buscar_ordens(termo, status)]


@router.get("/ordens/{ordem_id}", response_model=OrdemDTO)
def obter_ordem(
    ordem_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    return _ordem_dto(sessao, sessao.obter_ordem(ordem_id))


@router.post("/ordens", response_model=OrdemDTO, status_code=201)
def criar_ordem(
    dto: OrdemCriarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    ordem = sessao.adicionar_ordem(
        dto.cliente_id,
        itens=_itens(sessao, dto.itens),
        status=dto.status,
        data_abertura=dto.data_abertura,
        data_prevista=dto.data_prevista,
        data_conclusao=dto.data_conclusao,
        observacoes=dto.observacoes,
    )
    return _ordem_dto(sessao, ordem)


@router.patch("/ordens/{ordem_id}", response_model=OrdemDTO)
def atualizar_ordem(
    ordem_id: str,
    dto: OrdemAtualizarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    campos = dto.model_dump(exclude_unset=True, exclude={"carimbar_conclusao"})
    if "itens" in campos:
        if dto.itens is None:
            raise HTTPException(status_code=422, detail="itens nao pode ser nulo")
        campos["itens"] = _itens(sessao, dto.itens)
    if "status" in campos and dto.status is None:
        raise HTTPException(status_code=422, detail="status nao pode ser nulo")
    ordem = sessao.atualizar_ordem(ordem_id, carimbar_conclusao=dto.carimbar_conclusao, **campos)
    return _ordem_dto(sessao, ordem)


@router.delete("/ordens/{ordem_id}", status_code=204)
def excluir_ordem(
    ordem_id: str,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> Response:
    sessao.excluir_ordem(ordem_id)
    return Response(status_code=204)


@router.post("/ordens/{ordem_id}/itens", response_model=OrdemDTO, status_code=201)
def adicionar_item(
    ordem_id: str,
    dto: ItemOrdemEntradaDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    item = sessao.novo_item(dto.servico_id, dto.quantidade, dto.valor_unitario)
    return _ordem_dto(sessao, sessao.adicionar_item(ordem_id, item))


@router.patch("/ordens/{ordem_id}/itens/{indice}", response_model=OrdemDTO)
def atualizar_item(
    ordem_id: str,
    indice: int,
    dto: ItemOrdemAtualizarDTO,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    ordem = sessao.atualizar_item(ordem_id, indice, dto.quantidade, dto.valor_unitario)
    return _ordem_dto(sessao, ordem)


@router.delete("/ordens/{ordem_id}/itens/{indice}", response_model=OrdemDTO)
def remover_item(
    ordem_id: str,
    indice: int,
    sessao: SessaoCRM = Depends(get_sessao),  # noqa: B008
) -> OrdemDTO:
    return _ordem_dto(sessao, sessao.remover_item(ordem_id, indice))
