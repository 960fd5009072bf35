from dataclasses import dataclass

from boleto_sync.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class RefreshBoletoDetailCommand(CommandDTO):
    """
    Busca o detalhe do boleto no SGA e persiste PIX copia-e-cola
    e link do PDF.
    """
    client_id: str
    nosso_numero: str
