# atelie/interfaces/api/routes/status_routes.py
from fastapi import APIRouter, Depends

from atelie.application.dtos.sessao_dto import StatusDTO
from atelie.infrastructure.config import get_settings
from atelie.infrastructure.sessoes import RegistroSessoes
from atelie.interfaces.api.dependencies import get_registro

router = APIRouter()


@router.get("/status", response_model=StatusDTO)
def get_status(
    registro: RegistroSessoes = Depends(get_registro),  # noqa: B008
) -> StatusDTO:
    return StatusDTO(status="ok", store=get_settings().store, sessoes_ativas=len(registro))
