from __future__ import annotations

import math
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

import structlog

# ───────────────────────────────────────────────
# CQRS com paginação e log de performance
# ───────────────────────────────────────────────

C = TypeVar('C')  # Command type
Q = TypeVar('Q')  # Query filtros type
R = TypeVar('R')  # Query result type
T = TypeVar('T')  # PagedResult item type

logger = structlog.get_logger(__name__)


# ───────────────────────────────────────────────
# DTOs
# ───────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDTO:
    """Base para todos comandos de escrita."""
    pass


@dataclass(frozen=True)
class QueryDTO(Generic[Q]):
    """Base para consultas de leitura."""
    filtros: Q = field(default_factory=dict)


@dataclass(frozen=True)
class PaginatedQueryDTO(Generic[Q]):
    """Consulta paginada: filtros + paginação."""
    filtros: Q = field(default_factory=dict)
    page: int = 1
    page_size: int = 50


@dataclass(frozen=True)
class PagedResult(Generic[T]):
    """Resultado paginado padrão (com metadados extras opcionais)."""
    items: Sequence[T]
    total: int
    page: int
    page_size: int
    extra: dict[str, Any] = field(default_factory=dict)
    total_pages: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, 'total_pages', math.ceil(self.total / self.page_size) if self.page_size else 0)


# ───────────────────────────────────────────────
# Handlers Protocols
# ───────────────────────────────────────────────
class CommandHandler(Protocol, Generic[C]):
    def handle(self, command: C) -> Any:
        """Processa um comando e aplica mudanças de estado."""
        ...


class QueryHandler(Protocol, Generic[Q, R]):
    def handle(self, query: QueryDTO[Q]) -> R:
        """Processa uma consulta e retorna um resultado."""
        ...




class HandlerNotRegisteredError(LookupError):
    """Mensagem despachada sem handler registrado no barramento."""


# ───────────────────────────────────────────────
# Barramentos (registro por tipo + duração)
# ───────────────────────────────────────────────
class _Bus:
    kind = "message"
    done_level = "info"

    def __init__(self) -> None:
        self._handlers: dict[type, Any] = {}

    def register(self, message_type: type, handler: Any) -> None:
        self._handlers[message_type] = handler
        logger.debug(f"cqrs.{self.kind}_registered", name=message_type.__name__)

    def dispatch(self, message: Any) -> Any:
        name = type(message).__name__
        try:
            handler = self._handlers[type(message)]
        except KeyError:
            raise HandlerNotRegisteredError(f"Nenhum handler registrado para {self.kind} {name}") from None

        started = time.perf_counter()
        result = handler.handle(message)
        getattr(logger, self.done_level)(
            f"cqrs.{self.kind}_done", name=name, duration_ms=round((time.perf_counter() - started) * 1000, 1)
        )
        return result


class CommandBus(_Bus):
    """Comandos alteram estado; cada despacho é logado em INFO."""
    kind = "command"


class QueryBus(_Bus):
    kind = "query"
    done_level = "debug"
