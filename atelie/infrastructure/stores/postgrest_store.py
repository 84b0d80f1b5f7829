# atelie/infrastructure/stores/postgrest_store.py
#
# RecordStore remoto: tabelas org_* de um backend PostgREST (Supabase).
#
# Design decisions:
#   - O escopo por conta e garantido no servidor (RLS) a partir do access token
#     do usuario; este modulo nao embute nenhuma regra de autorizacao.
#   - Escritas pedem "Prefer: return=representation" e devolvem a linha como o
#     servidor a gravou (timestamps e defaults inclusos).
#   - PATCH/DELETE que nao devolvem linha significam id inexistente (ou fora do
#     escopo da conta) -> NaoEncontrado.
#   - Nao ha transacao entre tabelas pela REST API: este store nao oferece
#     transacao(), e a sessao compensa manualmente na baixa de contas.
#   - Sem retry: a falha sobe como ArmazenamentoIndisponivel para a UI avisar.
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from atelie.domain.cliente.entities import Cliente
from atelie.domain.erros import ArmazenamentoIndisponivel, NaoEncontrado
from atelie.domain.financeiro.entities import ContaFinanceira, MovimentoCaixa
from atelie.domain.ordem.entities import OrdemServico
from atelie.domain.registros import Registro, TipoRegistro
from atelie.domain.servico.entities import Servico
from atelie.infrastructure.serializacao import (
    campos_para_dict,
    dict_para_registro,
    registro_para_dict,
)

TABELAS: dict[TipoRegistro, str] = {
    TipoRegistro.CLIENTE: "org_clients",
    TipoRegistro.SERVICO: "org_services",
    TipoRegistro.ORDEM: "org_service_orders",
    TipoRegistro.CONTA: "org_financial_entries",
    TipoRegistro.MOVIMENTO: "org_cash_movements",
}

_ORDER: dict[TipoRegistro, str] = {
    TipoRegistro.CLIENTE: "nome.asc",
    TipoRegistro.SERVICO: "nome.asc",
    TipoRegistro.ORDEM: "data_abertura.desc",
    TipoRegistro.CONTA: "data_vencimento.desc",
    TipoRegistro.MOVIMENTO: "data.desc",
}

_RETURN_REPRESENTATION = {"Prefer": "return=representation"}


class PostgrestRecordStore:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        access_token: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("ATELIE_REMOTE_URL e obrigatorio para o store remoto")
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    # -- leitura ---------------------------------------------------------

    def listar_clientes(self) -> list[Cliente]:
        return self._listar(TipoRegistro.CLIENTE)  # type: ignore[return-value]

    def listar_servicos(self) -> list[Servico]:
        return self._listar(TipoRegistro.SERVICO)  # type: ignore[return-value]

    def listar_ordens(self) -> list[OrdemServico]:
        return self._listar(TipoRegistro.ORDEM)  # type: ignore[return-value]

    def listar_contas(self) -> list[ContaFinanceira]:
        return self._listar(TipoRegistro.CONTA)  # type: ignore[return-value]

    def listar_movimentos(self) -> list[MovimentoCaixa]:
        return self._listar(TipoRegistro.MOVIMENTO)  # type: ignore[return-value]

    # -- escrita ---------------------------------------------------------

    def inserir(self, tipo: TipoRegistro, registro: Registro) -> Registro:
        linhas = self._request(
            "POST",
            f"/{TABELAS[tipo]}",
            json=[registro_para_dict(registro)],
            headers=_RETURN_REPRESENTATION,
        )
        if not linhas:
            raise ArmazenamentoIndisponivel(f"{TABELAS[tipo]}: insercao sem representacao de retorno")
        return dict_para_registro(tipo, linhas[0])

    def atualizar(self, tipo: TipoRegistro, id: str, campos: Mapping[str, Any]) -> Registro:
        linhas = self._request(
            "PATCH",
            f"/{TABELAS[tipo]}",
            params={"id": f"eq.{id}"},
            json=campos_para_dict(campos),
            headers=_RETURN_REPRESENTATION,
        )
        if not linhas:
            raise NaoEncontrado(tipo.value, id)
        return dict_para_registro(tipo, linhas[0])

    def excluir(self, tipo: TipoRegistro, id: str) -> None:
        linhas = self._request(
            "DELETE",
            f"/{TABELAS[tipo]}",
            params={"id": f"eq.{id}"},
            headers=_RETURN_REPRESENTATION,
        )
        if not linhas:
            raise NaoEncontrado(tipo.value, id)

    # -- internos --------------------------------------------------------

    def _listar(self, tipo: TipoRegistro) -> list[Registro]:
        linhas = self._request(
            "GET",
            f"/{TABELAS[tipo]}",
            params={"select": "*", "order": _ORDER[tipo]},
        )
        return [dict_para_registro(tipo, linha) for linha in linhas]

    def _request(self, method: str, url: str, **kwargs: Any) -> list[dict[str, Any]]:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as err:
            raise ArmazenamentoIndisponivel(
                f"{method} {url}: HTTP {err.response.status_code}"
            ) from err
        except httpx.HTTPError as err:
            raise ArmazenamentoIndisponivel(f"{method} {url}: {err}") from err
        if not response.content:
            return []
        dados = response.json()
        return dados if isinstance(dados, list) else [dados]
