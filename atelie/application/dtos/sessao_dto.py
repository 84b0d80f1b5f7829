# atelie/application/dtos/sessao_dto.py
from pydantic import BaseModel, Field


class AbrirSessaoDTO(BaseModel):
    access_token: str = Field(min_length=1)
    organizacao_id: str | None = None


class SessaoDTO(BaseModel):
    carregada: bool
    desatualizadas: list[str]
    clientes: int
    servicos: int
    ordens: int
    contas: int
    movimentos: int


class StatusDTO(BaseModel):
    status: str
    store: str
    sessoes_ativas: int
