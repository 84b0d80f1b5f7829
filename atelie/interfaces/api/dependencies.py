# atelie/interfaces/api/dependencies.py
from __future__ import annotations

from functools import lru_cache

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from atelie.application.services.sessao_crm import SessaoCRM
from atelie.infrastructure.config import get_settings
from atelie.infrastructure.sessoes import RegistroSessoes
from atelie.infrastructure.store_factory import criar_store

_bearer = HTTPBearer(auto_error=False)


@lru_cache(maxsize=1)
def get_registro() -> RegistroSessoes:
    settings = get_settings()
    return RegistroSessoes(lambda token, organizacao_id: criar_store(settings, token, organizacao_id))


def get_token(
    credenciais: HTTPAuthorizationCredentials | None = Depends(_bearer),  # noqa: B008
) -> str:
    if credenciais is None or not credenciais.credentials:
        raise HTTPException(
            status_code=401,
            detail="Token de acesso ausente",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credenciais.credentials


def get_sessao(
    token: str = Depends(get_token),  # noqa: B008
    registro: RegistroSessoes = Depends(get_registro),  # noqa: B008
) -> SessaoCRM:
    sessao = registro.obter(token)
    if sessao is None:
        raise HTTPException(
            status_code=401,
            detail="Sessao nao encontrada",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return sessao
