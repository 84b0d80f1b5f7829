# atelie/domain/erros.py
from __future__ import annotations


class ErroCRM(Exception):
    """Base de todos os erros de dominio do CRM."""


class NaoEncontrado(ErroCRM):
    """Operacao referenciou um id ausente da colecao."""

    def __init__(self, tipo: str, id: str) -> None:
        super().__init__(f"{tipo} nao encontrado: {id}")
        self.tipo = tipo
        self.id = id


class EstadoInvalido(ErroCRM):
    """Operacao viola um invariante de estado (ex.: pagar conta ja paga)."""


class ErroValidacao(ErroCRM, ValueError):
    """Entrada malformada: valor negativo, campo obrigatorio vazio, quantidade < 1."""


class ArmazenamentoIndisponivel(ErroCRM):
    """Falha de persistencia (rede, disco, banco)."""


class AcessoNegado(ErroCRM):
    """Token sem acesso a organizacao pedida."""
