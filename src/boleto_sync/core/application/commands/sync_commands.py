from dataclasses import dataclass

from boleto_sync.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class SyncBoletosCommand(CommandDTO):
    """
    Sincroniza os boletos de UM cliente no intervalo de vencimento
    informado (datas DD/MM/YYYY, inclusivas).
    """
    client_id: str
    start_date: str
    end_date: str
    situation_code: str = "2"
