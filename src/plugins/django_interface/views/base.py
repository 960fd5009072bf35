from __future__ import annotations

import structlog
from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.core.application.cqrs import CommandBus, QueryBus
from boleto_sync.core.domain.exceptions import (
    BoletoSyncError,
    ClientNotFoundError,
    InvalidDateError,
    InvalidPeriodError,
    ShortCodeExhaustedError,
    SyncAlreadyRunningError,
    SyncConfigurationError,
    UpstreamConnectionError,
    UpstreamError,
)

logger = structlog.get_logger(__name__)

# ordem importa: subclasses antes das bases
ERROR_STATUS: tuple[tuple[type[BoletoSyncError], int, str], ...] = (
    (ClientNotFoundError, status.HTTP_404_NOT_FOUND, "Não encontrado"),
    (SyncConfigurationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "Configuração inválida"),
    (SyncAlreadyRunningError, status.HTTP_409_CONFLICT, "Sincronização em andamento"),
    (UpstreamConnectionError, status.HTTP_504_GATEWAY_TIMEOUT, "SGA indisponível"),
    (UpstreamError, status.HTTP_502_BAD_GATEWAY, "Erro na API SGA"),
    (InvalidDateError, status.HTTP_400_BAD_REQUEST, "Erro de validação"),
    (InvalidPeriodError, status.HTTP_400_BAD_REQUEST, "Erro de validação"),
    (ShortCodeExhaustedError, status.HTTP_503_SERVICE_UNAVAILABLE, "Falha ao emitir link"),
)


def command_bus() -> CommandBus:
    return setup_di_container_from_settings(settings).command_bus()


def query_bus() -> QueryBus:
    return setup_di_container_from_settings(settings).query_bus()


def error_response(error: str, message: str, http_status: int, **extra) -> Response:
    return Response({"error": error, "message": message, **extra}, status=http_status)


class DomainErrorMixin:
    """Converte a taxonomia de erros do domínio em respostas JSON {error, message}."""

    def handle_exception(self, exc):
        if isinstance(exc, BoletoSyncError):
            for exc_type, http_status, label in ERROR_STATUS:
                if isinstance(exc, exc_type):
                    extra = {}
                    if isinstance(exc, UpstreamError) and exc.status_code:
                        extra["upstream_status"] = exc.status_code
                    logger.warning(
                        "http.domain_error",
                        error_type=type(exc).__name__,
                        status=http_status,
                        message=str(exc),
                    )
                    return error_response(label, str(exc), http_status, **extra)
            logger.error("http.unmapped_domain_error", error_type=type(exc).__name__, message=str(exc))
            return error_response("Erro interno", str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        return super().handle_exception(exc)
