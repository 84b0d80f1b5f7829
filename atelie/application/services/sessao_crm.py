# atelie/application/services/sessao_crm.py
from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from atelie.domain.cliente.entities import Cliente
from atelie.domain.erros import ErroCRM, ErroValidacao, EstadoInvalido, NaoEncontrado
from atelie.domain.financeiro.entities import Baixa, ContaFinanceira, MovimentoCaixa
from atelie.domain.financeiro.enums import (
    CATEGORIA_DA_BAIXA,
    MOVIMENTO_DA_BAIXA,
    Periodo,
    StatusConta,
    TipoConta,
    TipoMovimento,
)
from atelie.domain.ordem.entities import ItemOrdem, OrdemServico
from atelie.domain.ordem.enums import StatusOrdem
from atelie.domain.registros import (
    RecordStore,
    Registro,
    TipoRegistro,
    TransactionalRecordStore,
    ordenar,
)
from atelie.domain.servico.entities import Servico

from . import agregacao
from .agregacao import ResumoCaixa, ResumoOrdens, TotaisFinanceiros

logger = logging.getLogger(__name__)

_CAMPOS_EDITAVEIS: dict[TipoRegistro, frozenset[str]] = {
    TipoRegistro.CLIENTE: frozenset({"nome", "telefone", "email", "endereco"}),
    TipoRegistro.SERVICO: frozenset({"nome", "tipo", "valor", "descricao"}),
    TipoRegistro.ORDEM: frozenset({
        "cliente_id", "itens", "status", "data_abertura",
        "data_prevista", "data_conclusao", "observacoes",
    }),
    # valor e fixado na criacao; status/data_pagamento so mudam via marcar_conta_paga
    TipoRegistro.CONTA: frozenset({"tipo", "descricao", "data_vencimento", "ordem_servico_id"}),
}

_NOME_TIPO: dict[TipoRegistro, str] = {
    TipoRegistro.CLIENTE: "Cliente",
    TipoRegistro.SERVICO: "Servico",
    TipoRegistro.ORDEM: "OrdemServico",
    TipoRegistro.CONTA: "ContaFinanceira",
    TipoRegistro.MOVIMENTO: "MovimentoCaixa",
}


def _novo_id() -> str:
    return str(uuid.uuid4())


class SessaoCRM:
    """Raiz de agregacao da sessao autenticada.

    Imperative Shell: dona da copia em memoria de todos os registros da sessao,
    media toda escrita no RecordStore e recalcula os agregados (via agregacao,
    o Pure Core) a cada leitura, de modo que nenhum total fique defasado.

    Concorrencia: mutacoes sao serializadas por colecao. Cada colecao tem um
    contador de versao incrementado a cada mutacao local; recarregar() so troca
    uma colecao cuja versao nao mudou durante a busca. O resultado de uma escrita
    e mesclado por id (nunca substitui a colecao inteira).
    """

    def __init__(
        self,
        store: RecordStore,
        relogio: Callable[[], datetime] = datetime.now,
        gerar_id: Callable[[], str] = _novo_id,
    ) -> None:
        self._store = store
        self._relogio = relogio
        self._gerar_id = gerar_id
        self._colecoes: dict[TipoRegistro, list[Registro]] = {t: [] for t in TipoRegistro}
        self._versoes: dict[TipoRegistro, int] = {t: 0 for t in TipoRegistro}
        self._locks: dict[TipoRegistro, threading.Lock] = {t: threading.Lock() for t in TipoRegistro}
        self._estado = threading.Lock()
        self._desatualizadas: set[TipoRegistro] = set()
        self._carregando = False
        self._carregada = False
        self._encerrada = False

    # ------------------------------------------------------------------
    # Ciclo de vida
    # ------------------------------------------------------------------

    @property
    def carregando(self) -> bool:
        """True apenas durante a carga inicial. Recargas posteriores mantem os dados visiveis."""
        return self._carregando

    @property
    def carregada(self) -> bool:
        return self._carregada

    @property
    def desatualizadas(self) -> frozenset[TipoRegistro]:
        """Colecoes que uma recarga nao pode trocar (mutacao concorrente) ou cuja compensacao falhou."""
        with self._estado:
            return frozenset(self._desatualizadas)

    def carregar(self) -> None:
        """Carga inicial. Durante ela `carregando` e True."""
        self._carregando = True
        try:
            self.recarregar()
        finally:
            self._carregando = False

    def recarregar(self) -> None:
        """Busca todas as colecoes no store. A recarga vence o estado local antigo,
        mas nao atropela uma mutacao local concluida durante a busca."""
        self._verificar_aberta()
        with self._estado:
            versoes = dict(self._versoes)

        buscado: dict[TipoRegistro, list[Registro]] = {
            TipoRegistro.CLIENTE: list(self._store.listar_clientes()),
            TipoRegistro.SERVICO: list(self._store.listar_servicos()),
            TipoRegistro.ORDEM: list(self._store.listar_ordens()),
            TipoRegistro.CONTA: list(self._store.listar_contas()),
            TipoRegistro.MOVIMENTO: list(self._store.listar_movimentos()),
        }

        with self._estado:
            for tipo, registros in buscado.items():
                if self._versoes[tipo] != versoes[tipo]:
                    self._desatualizadas.add(tipo)
                    logger.info("recarga de %s descartada: mutacao local concorrente", tipo.value)
                    continue
                self._colecoes[tipo] = ordenar(tipo, registros)
                self._desatualizadas.discard(tipo)
            self._carregada = True
        logger.info(
            "sessao recarregada: %s",
            ", ".join(f"{t.value}={len(r)}" for t, r in buscado.items()),
        )

    def encerrar(self) -> None:
        """Descarta os dados em memoria. Operacoes posteriores falham com EstadoInvalido."""
        with self._estado:
            self._encerrada = True
            self._colecoes = {t: [] for t in TipoRegistro}

    # ------------------------------------------------------------------
    # Leitura
    # ------------------------------------------------------------------

    @property
    def clientes(self) -> tuple[Cliente, ...]:
        return tuple(self._colecoes[TipoRegistro.CLIENTE])  # type: ignore[arg-type]

    @property
    def servicos(self) -> tuple[Servico, ...]:
        return tuple(self._colecoes[TipoRegistro.SERVICO])  # type: ignore[arg-type]

    @property
    def ordens(self) -> tuple[OrdemServico, ...]:
        return tuple(self._colecoes[TipoRegistro.ORDEM])  # type: ignore[arg-type]

    @property
    def contas(self) -> tuple[ContaFinanceira, ...]:
        return tuple(self._colecoes[TipoRegistro.CONTA])  # type: ignore[arg-type]

    @property
    def movimentos(self) -> tuple[MovimentoCaixa, ...]:
        return tuple(self._colecoes[TipoRegistro.MOVIMENTO])  # type: ignore[arg-type]

    def obter_cliente(self, id: str) -> Cliente:
        return self._buscar(TipoRegistro.CLIENTE, id)  # type: ignore[return-value]

    def obter_servico(self, id: str) -> Servico:
        return self._buscar(TipoRegistro.SERVICO, id)  # type: ignore[return-value]

    def obter_ordem(self, id: str) -> OrdemServico:
        return self._buscar(TipoRegistro.ORDEM, id)  # type: ignore[return-value]

    def obter_conta(self, id: str) -> ContaFinanceira:
        return self._buscar(TipoRegistro.CONTA, id)  # type: ignore[return-value]

    def cliente_da_ordem(self, ordem: OrdemServico) -> Cliente | None:
        """None quando o cliente foi excluido: exclusao nao cascateia."""
        return self._procurar(TipoRegistro.CLIENTE, ordem.cliente_id)  # type: ignore[return-value]

    def ordem_da_conta(self, conta: ContaFinanceira) -> OrdemServico | None:
        if conta.ordem_servico_id is None:
            return None
        return self._procurar(TipoRegistro.ORDEM, conta.ordem_servico_id)  # type: ignore[return-value]

    def servico_do_item(self, item: ItemOrdem) -> Servico | None:
        return self._procurar(TipoRegistro.SERVICO, item.servico_id)  # type: ignore[return-value]

    # Agregados: sempre recalculados do conjunto atual.

    @property
    def saldo_caixa(self) -> Decimal:
        return agregacao.calcular_saldo_caixa(self.movimentos)

    def totais_pendentes(self) -> TotaisFinanceiros:
        return agregacao.calcular_totais_pendentes(self.contas)

    def totais_vencidos(self, agora: datetime | None = None) -> TotaisFinanceiros:
        return agregacao.calcular_totais_vencidos(self.contas, agora or self._relogio())

    def contas_vencidas(self, agora: datetime | None = None) -> list[ContaFinanceira]:
        referencia = agora or self._relogio()
        return [c for c in self.contas if agregacao.esta_vencida(c, referencia)]

    def resumo_caixa(self, periodo: Periodo, agora: datetime | None = None) -> ResumoCaixa:
        return agregacao.resumir_caixa(self.movimentos, periodo, agora or self._relogio())

    def resumo_ordens(self) -> ResumoOrdens:
        return agregacao.resumir_ordens(self.ordens)

    def agora(self) -> datetime:
        return self._relogio()

    def esta_vencida(self, conta: ContaFinanceira, agora: datetime | None = None) -> bool:
        return agregacao.esta_vencida(conta, agora or self._relogio())

    def buscar_clientes(self, termo: str | None = None) -> list[Cliente]:
        return agregacao.filtrar_clientes(self.clientes, termo)

    def buscar_servicos(self, termo: str | None = None) -> list[Servico]:
        return agregacao.filtrar_servicos(self.servicos, termo)

    def buscar_ordens(
        self,
        termo: str | None = None,
        status: StatusOrdem | None = None,
    ) -> list[OrdemServico]:
        return agregacao.filtrar_ordens(self.ordens, self.cliente_da_ordem, termo, status)

    def buscar_contas(
        self,
        termo: str | None = None,
        tipo: TipoConta | None = None,
        status: StatusConta | None = None,
        periodo: Periodo | None = None,
        agora: datetime | None = None,
    ) -> list[ContaFinanceira]:
        """Filtros da tela financeira. periodo recorta por data_vencimento."""
        contas = agregacao.filtrar_contas(self.contas, termo, tipo, status)
        if periodo is not None:
            contas = agregacao.filtrar_por_periodo(contas, "data_vencimento", periodo, agora or self._relogio())
        return contas

    def buscar_movimentos(
        self,
        termo: str | None = None,
        tipo: TipoMovimento | None = None,
        categoria: str | None = None,
        periodo: Periodo | None = None,
        agora: datetime | None = None,
    ) -> list[MovimentoCaixa]:
        movimentos = agregacao.filtrar_movimentos(self.movimentos, termo, tipo, categoria)
        if periodo is not None:
            movimentos = agregacao.filtrar_por_periodo(movimentos, "data", periodo, agora or self._relogio())
        return movimentos

    # ------------------------------------------------------------------
    # Clientes
    # ------------------------------------------------------------------

    def adicionar_cliente(
        self,
        nome: str,
        telefone: str,
        email: str | None = None,
        endereco: str | None = None,
    ) -> Cliente:
        cliente = Cliente(
            id=self._gerar_id(),
            nome=nome,
            telefone=telefone,
            email=email,
            endereco=endereco,
            data_cadastro=self._relogio(),
        )
        return self._inserir(TipoRegistro.CLIENTE, cliente)  # type: ignore[return-value]

    def atualizar_cliente(self, id: str, **campos: Any) -> Cliente:
        return self._atualizar(TipoRegistro.CLIENTE, id, lambda _atual: campos)  # type: ignore[return-value]

    def excluir_cliente(self, id: str) -> None:
        self._excluir(TipoRegistro.CLIENTE, id)

    # ------------------------------------------------------------------
    # Servicos
    # ------------------------------------------------------------------

    def adicionar_servico(
        self,
        nome: str,
        tipo: str,
        valor: Decimal | str | int,
        descricao: str | None = None,
    ) -> Servico:
        servico = Servico(id=self._gerar_id(), nome=nome, tipo=tipo, valor=valor, descricao=descricao)  # type: ignore[arg-type]
        return self._inserir(TipoRegistro.SERVICO, servico)  # type: ignore[return-value]

    def atualizar_servico(self, id: str, **campos: Any) -> Servico:
        return self._atualizar(TipoRegistro.SERVICO, id, lambda _atual: campos)  # type: ignore[return-value]

    def excluir_servico(self, id: str) -> None:
        self._excluir(TipoRegistro.SERVICO, id)

    # ------------------------------------------------------------------
    # Ordens de servico
    # ------------------------------------------------------------------

    def novo_item(
        self,
        servico_id: str,
        quantidade: int,
        valor_unitario: Decimal | str | None = None,
    ) -> ItemOrdem:
        """Monta uma linha. Sem preco explicito, congela o preco atual do catalogo."""
        if valor_unitario is None:
            valor_unitario = self.obter_servico(servico_id).valor
        return ItemOrdem(servico_id=servico_id, quantidade=quantidade, valor_unitario=valor_unitario)  # type: ignore[arg-type]

    def adicionar_ordem(
        self,
        cliente_id: str,
        itens: Iterable[ItemOrdem] = (),
        status: StatusOrdem = StatusOrdem.PENDENTE,
        data_abertura: datetime | None = None,
        data_prevista: datetime | None = None,
        data_conclusao: datetime | None = None,
        observacoes: str | None = None,
    ) -> OrdemServico:
        self.obter_cliente(cliente_id)
        itens = tuple(itens)
        ordem = OrdemServico(
            id=self._gerar_id(),
            cliente_id=cliente_id,
            itens=itens,
            valor_total=agregacao.calcular_total_ordem(itens),
            status=status,
            data_abertura=data_abertura or self._relogio(),
            data_prevista=data_prevista,
            data_conclusao=data_conclusao,
            observacoes=observacoes,
        )
        return self._inserir(TipoRegistro.ORDEM, ordem)  # type: ignore[return-value]

    def atualizar_ordem(self, id: str, *, carimbar_conclusao: bool = False, **campos: Any) -> OrdemServico:
        """Merge parcial. data_conclusao so e preenchida se o chamador passar,
        ou se pedir carimbar_conclusao=True ao mover para CONCLUIDA."""
        if "valor_total" in campos:
            raise ErroValidacao("valor_total e derivado dos itens e nao pode ser atribuido")
        if "cliente_id" in campos:
            self.obter_cliente(campos["cliente_id"])
        if (
            carimbar_conclusao
            and campos.get("status") == StatusOrdem.CONCLUIDA
            and campos.get("data_conclusao") is None
        ):
            campos["data_conclusao"] = self._relogio()
        return self._atualizar(TipoRegistro.ORDEM, id, lambda _atual: campos)  # type: ignore[return-value]

    def excluir_ordem(self, id: str) -> None:
        self._excluir(TipoRegistro.ORDEM, id)

    def adicionar_item(self, ordem_id: str, item: ItemOrdem) -> OrdemServico:
        return self._atualizar(  # type: ignore[return-value]
            TipoRegistro.ORDEM, ordem_id, lambda atual: {"itens": (*atual.itens, item)},
        )

    def atualizar_item(
        self,
        ordem_id: str,
        indice: int,
        quantidade: int | None = None,
        valor_unitario: Decimal | str | None = None,
    ) -> OrdemServico:
        def montar(atual: OrdemServico) -> dict[str, Any]:
            itens = list(atual.itens)
            antigo = itens[self._indice_valido(atual, indice)]
            itens[indice] = ItemOrdem(
                servico_id=antigo.servico_id,
                quantidade=antigo.quantidade if quantidade is None else quantidade,
                valor_unitario=antigo.valor_unitario if valor_unitario is None else valor_unitario,  # type: ignore[arg-type]
            )
            return {"itens": tuple(itens)}

        return self._atualizar(TipoRegistro.ORDEM, ordem_id, montar)  # type: ignore[arg-type,return-value]

    def remover_item(self, ordem_id: str, indice: int) -> OrdemServico:
        def montar(atual: OrdemServico) -> dict[str, Any]:
            itens = list(atual.itens)
            del itens[self._indice_valido(atual, indice)]
            return {"itens": tuple(itens)}

        return self._atualizar(TipoRegistro.ORDEM, ordem_id, montar)  # type: ignore[arg-type,return-value]

    # ------------------------------------------------------------------
    # Financeiro
    # ------------------------------------------------------------------

    def adicionar_conta(
        self,
        tipo: TipoConta,
        descricao: str,
        valor: Decimal | str | int,
        data_vencimento: datetime,
        ordem_servico_id: str | None = None,
    ) -> ContaFinanceira:
        if ordem_servico_id:
            self.obter_ordem(ordem_servico_id)
        conta = ContaFinanceira(
            id=self._gerar_id(),
            tipo=tipo,
            descricao=descricao,
            valor=valor,  # type: ignore[arg-type]
            data_vencimento=data_vencimento,
            ordem_servico_id=ordem_servico_id,
        )
        return self._inserir(TipoRegistro.CONTA, conta)  # type: ignore[return-value]

    def atualizar_conta(self, id: str, **campos: Any) -> ContaFinanceira:
        if "valor" in campos:
            raise ErroValidacao("valor da conta e fixado na criacao")
        if "status" in campos or "data_pagamento" in campos:
            raise ErroValidacao("use marcar_conta_paga para quitar uma conta")
        if campos.get("ordem_servico_id"):
            self.obter_ordem(campos["ordem_servico_id"])
        return self._atualizar(TipoRegistro.CONTA, id, lambda _atual: campos)  # type: ignore[return-value]

    def excluir_conta(self, id: str) -> None:
        self._excluir(TipoRegistro.CONTA, id)

    def marcar_conta_paga(self, conta_id: str) -> Baixa:
        """Operacao composta: quita a conta E lanca o movimento no caixa.

        Atomica para quem chama: ou as duas escritas valem, ou nenhuma. Usa a
        transacao do store quando existe; senao desfaz a primeira escrita se a
        segunda falhar. A memoria so e tocada depois das duas escritas.
        """
        self._verificar_aberta()
        # ordem fixa de aquisicao: contas antes de movimentos
        with self._locks[TipoRegistro.CONTA], self._locks[TipoRegistro.MOVIMENTO]:
            conta = self.obter_conta(conta_id)
            if conta.status == StatusConta.PAGA:
                raise EstadoInvalido(f"Conta {conta_id} ja esta paga")

            agora = self._relogio()
            campos = {"status": StatusConta.PAGA, "data_pagamento": agora}
            movimento = MovimentoCaixa(
                id=self._gerar_id(),
                tipo=MOVIMENTO_DA_BAIXA[conta.tipo],
                valor=conta.valor,
                descricao=f"Pagamento: {conta.descricao}",
                data=agora,
                categoria=CATEGORIA_DA_BAIXA[conta.tipo],
            )

            if isinstance(self._store, TransactionalRecordStore):
                with self._store.transacao():
                    conta_paga = self._store.atualizar(TipoRegistro.CONTA, conta.id, campos)
                    movimento_salvo = self._store.inserir(TipoRegistro.MOVIMENTO, movimento)
            else:
                conta_paga, movimento_salvo = self._baixar_com_compensacao(conta, campos, movimento)

            self._mesclar(TipoRegistro.CONTA, conta_paga)
            self._mesclar(TipoRegistro.MOVIMENTO, movimento_salvo)

        logger.info(
            "conta %s paga: movimento %s de %s",
            conta_id, movimento_salvo.tipo.value, movimento_salvo.valor,  # type: ignore[union-attr]
        )
        return Baixa(conta=conta_paga, movimento=movimento_salvo)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Caixa (somente inclusao)
    # ------------------------------------------------------------------

    def adicionar_movimento(
        self,
        tipo: TipoMovimento,
        valor: Decimal | str | int,
        descricao: str,
        categoria: str,
        data: datetime | None = None,
    ) -> MovimentoCaixa:
        movimento = MovimentoCaixa(
            id=self._gerar_id(),
            tipo=tipo,
            valor=valor,  # type: ignore[arg-type]
            descricao=descricao,
            data=data or self._relogio(),
            categoria=categoria,
        )
        return self._inserir(TipoRegistro.MOVIMENTO, movimento)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------

    def _verificar_aberta(self) -> None:
        if self._encerrada:
            raise EstadoInvalido("Sessao encerrada")

    def _procurar(self, tipo: TipoRegistro, id: str) -> Registro | None:
        for registro in self._colecoes[tipo]:
            if registro.id == id:
                return registro
        return None

    def _buscar(self, tipo: TipoRegistro, id: str) -> Registro:
        registro = self._procurar(tipo, id)
        if registro is None:
            raise NaoEncontrado(_NOME_TIPO[tipo], id)
        return registro

    @staticmethod
    def _indice_valido(ordem: OrdemServico, indice: int) -> int:
        if not 0 <= indice < len(ordem.itens):
            raise NaoEncontrado("ItemOrdem", f"{ordem.id}[{indice}]")
        return indice

    def _mesclar(self, tipo: TipoRegistro, registro: Registro) -> None:
        """Substitui pelo id ou acrescenta. Nunca sobrescreve a colecao."""
        with self._estado:
            atual = [r for r in self._colecoes[tipo] if r.id != registro.id]
            atual.append(registro)
            self._colecoes[tipo] = ordenar(tipo, atual)
            self._versoes[tipo] += 1

    def _remover(self, tipo: TipoRegistro, id: str) -> None:
        with self._estado:
            self._colecoes[tipo] = [r for r in self._colecoes[tipo] if r.id != id]
            self._versoes[tipo] += 1

    def _inserir(self, tipo: TipoRegistro, registro: Registro) -> Registro:
        self._verificar_aberta()
        with self._locks[tipo]:
            salvo = self._store.inserir(tipo, registro)
            self._mesclar(tipo, salvo)
        logger.info("%s incluido: %s", _NOME_TIPO[tipo], salvo.id)
        return salvo

    def _atualizar(
        self,
        tipo: TipoRegistro,
        id: str,
        montar: Callable[[Any], Mapping[str, Any]],
    ) -> Registro:
        """Merge parcial: so os campos informados mudam. Valida antes de escrever."""
        self._verificar_aberta()
        with self._locks[tipo]:
            atual = self._buscar(tipo, id)
            campos = dict(montar(atual))
            desconhecidos = set(campos) - _CAMPOS_EDITAVEIS[tipo]
            if desconhecidos:
                raise ErroValidacao(
                    f"campos nao editaveis em {_NOME_TIPO[tipo]}: {sorted(desconhecidos)}"
                )
            if not campos:
                return atual

            if "itens" in campos:
                campos["itens"] = tuple(campos["itens"])
                campos["valor_total"] = agregacao.calcular_total_ordem(campos["itens"])

            # replace() roda __post_init__: valida e normaliza antes do IO
            novo = replace(atual, **campos)
            normalizados = {k: getattr(novo, k) for k in campos}

            salvo = self._store.atualizar(tipo, id, normalizados)
            self._mesclar(tipo, salvo)
        logger.info("%s atualizado: %s (%s)", _NOME_TIPO[tipo], id, ", ".join(sorted(campos)))
        return salvo

    def _excluir(self, tipo: TipoRegistro, id: str) -> None:
        self._verificar_aberta()
        with self._locks[tipo]:
            self._buscar(tipo, id)
            self._store.excluir(tipo, id)
            self._remover(tipo, id)
        logger.info("%s excluido: %s", _NOME_TIPO[tipo], id)

    def _baixar_com_compensacao(
        self,
        conta: ContaFinanceira,
        campos: Mapping[str, Any],
        movimento: MovimentoCaixa,
    ) -> tuple[Registro, Registro]:
        """Store sem transacao: se o movimento falhar, volta a conta para pendente."""
        conta_paga = self._store.atualizar(TipoRegistro.CONTA, conta.id, campos)
        try:
            movimento_salvo = self._store.inserir(TipoRegistro.MOVIMENTO, movimento)
        except Exception:
            logger.warning("falha ao lancar movimento da conta %s; desfazendo baixa", conta.id)
            try:
                self._store.atualizar(
                    TipoRegistro.CONTA,
                    conta.id,
                    {"status": StatusConta.PENDENTE, "data_pagamento": None},
                )
            except ErroCRM:
                logger.exception("compensacao da conta %s falhou; recarga necessaria", conta.id)
                with self._estado:
                    self._desatualizadas.add(TipoRegistro.CONTA)
            raise
        return conta_paga, movimento_salvo
