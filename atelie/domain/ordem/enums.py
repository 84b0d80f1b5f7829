# atelie/domain/ordem/enums.py
from __future__ import annotations

from enum import Enum


class StatusOrdem(str, Enum):
    """pendente -> em_andamento -> concluida; pendente|em_andamento -> cancelada.

    As transicoes sao decididas pelo chamador; qualquer um dos quatro valores e aceito.
    """

    PENDENTE = "pendente"
    EM_ANDAMENTO = "em_andamento"
    CONCLUIDA = "concluida"
    CANCELADA = "cancelada"
