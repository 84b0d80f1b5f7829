# atelie/application/dtos/resumo_dto.py
from pydantic import BaseModel

from .financeiro_dto import TotaisDTO


class OrdensPorStatusDTO(BaseModel):
    pendentes: int
    em_andamento: int
    concluidas: int
    canceladas: int


class ResumoDTO(BaseModel):
    total_clientes: int
    total_servicos: int
    total_ordens: int
    ordens: OrdensPorStatusDTO
    receita: str  # soma das ordens concluidas
    saldo_caixa: str
    pendentes: TotaisDTO
    vencidas: TotaisDTO
