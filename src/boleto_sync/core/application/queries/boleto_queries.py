from dataclasses import dataclass

from boleto_sync.core.application.cqrs import PaginatedQueryDTO, QueryDTO


@dataclass(frozen=True)
class ListBoletosQuery(PaginatedQueryDTO):
    """
    Filtros aceitos: client_id (obrigatório), consultant_id,
    billing_status, start_date, end_date.
    """
    pass


@dataclass(frozen=True, kw_only=True)
class GetBoletoQuery(QueryDTO):
    boleto_id: str


@dataclass(frozen=True, kw_only=True)
class GetBoletoByNossoNumeroQuery(QueryDTO):
    client_id: str
    nosso_numero: str


@dataclass(frozen=True, kw_only=True)
class GetConsultantSummaryQuery(QueryDTO):
    client_id: str
    consultant_id: str
