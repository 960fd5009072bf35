"""Taxonomia de erros da sincronização de boletos e dos links de consultor."""


class BoletoSyncError(Exception):
    """Classe base para todas as exceções do contexto."""
    pass


# ─── Configuração (fatal, não retentável) ─────────────────────
class SyncConfigurationError(BoletoSyncError):
    """Cliente/consultores em estado que impede a sincronização."""
    pass


class ClientNotFoundError(SyncConfigurationError):
    def __init__(self, client_id):
        super().__init__(f"Cliente {client_id} não encontrado.")
        self.client_id = client_id


class ClientInactiveError(SyncConfigurationError):
    def __init__(self, client_id):
        super().__init__(f"Cliente {client_id} está inativo.")
        self.client_id = client_id


class NoActiveConsultantsError(SyncConfigurationError):
    def __init__(self, client_id):
        super().__init__(f"Cliente {client_id} não possui consultores ativos.")
        self.client_id = client_id


# ─── Concorrência ─────────────────────────────────────────────
class SyncAlreadyRunningError(BoletoSyncError):
    """Já existe uma sincronização em andamento para o mesmo cliente."""
    def __init__(self, client_id):
        super().__init__(f"Sincronização já em andamento para o cliente {client_id}.")
        self.client_id = client_id


# ─── Upstream (SGA) ───────────────────────────────────────────
class UpstreamError(BoletoSyncError):
    """Falha na comunicação com a API SGA."""
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamAuthenticationError(UpstreamError):
    """401: token inválido ou expirado."""
    pass


class UpstreamAuthorizationError(UpstreamError):
    """403: acesso negado ao recurso."""
    pass


class UpstreamNotFoundError(UpstreamError):
    """404: endpoint mal configurado ou registro inexistente."""
    pass


class UpstreamServerError(UpstreamError):
    """5xx: falha interna do SGA. Retentável."""
    pass


class UpstreamConnectionError(UpstreamError):
    """Sem resposta (rede, DNS, timeout). Retentável."""
    pass


class UpstreamRequestError(UpstreamError):
    """Demais respostas 4xx."""
    pass


# Erros que valem nova tentativa no nível da task
TRANSIENT_UPSTREAM_ERRORS = (UpstreamServerError, UpstreamConnectionError)


# ─── Por registro ─────────────────────────────────────────────
class MalformedRecordError(BoletoSyncError):
    """Registro do SGA sem os campos mínimos para persistência."""
    pass


# ─── Links ────────────────────────────────────────────────────
class ShortCodeExhaustedError(BoletoSyncError):
    def __init__(self, attempts: int):
        super().__init__(f"Não foi possível alocar um short code livre após {attempts} tentativas.")
        self.attempts = attempts


# ─── Validação de entrada ─────────────────────────────────────
class InvalidDateError(BoletoSyncError, ValueError):
    pass


class InvalidPeriodError(BoletoSyncError, ValueError):
    pass
