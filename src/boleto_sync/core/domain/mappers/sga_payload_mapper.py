from __future__ import annotations

import re
import uuid
from decimal import Decimal, InvalidOperation

import structlog

from boleto_sync.core.application.dtos.sga_dtos import SgaBoletoDTO, SgaVeiculoDTO
from boleto_sync.core.domain.entities.boleto_entity import BoletoEntity
from boleto_sync.core.domain.exceptions import MalformedRecordError
from boleto_sync.core.utils.date_utils import normalize_due_date

logger = structlog.get_logger(__name__)

NON_DIGITS = re.compile(r"\D")


class SgaPayloadMapper:
    # ───────────────────────── helpers ──────────────────────────
    @staticmethod
    def digits_only(value: str | None) -> str:
        return NON_DIGITS.sub("", value or "")

    @staticmethod
    def parse_amount(value: str | None) -> Decimal:
        """'123.45' / '123,45' → Decimal; inválido ⇒ 0."""
        if value is None:
            return Decimal("0")
        raw = str(value).strip()
        if "," in raw:
            raw = raw.replace(".", "").replace(",", ".")
        try:
            return Decimal(raw).quantize(Decimal("0.01"))
        except (InvalidOperation, ValueError):
            logger.debug("mapper.invalid_amount", value=value)
            return Decimal("0")

    # ───────────────────────── boletos ──────────────────────────
    @classmethod
    def map_boleto(
        cls,
        dto: SgaBoletoDTO,
        *,
        client_id: uuid.UUID,
        consultant_id: uuid.UUID,
        vehicle: SgaVeiculoDTO,
    ) -> BoletoEntity:
        nosso_numero = (dto.nosso_numero or "").strip()
        if not nosso_numero:
            raise MalformedRecordError("Boleto sem nosso_numero.")

        return BoletoEntity(
            client_id=client_id,
            consultant_id=consultant_id,
            nosso_numero=nosso_numero,
            digitable_line=dto.linha_digitavel or "",
            amount=cls.parse_amount(dto.valor_boleto),
            debtor_name=dto.nome_associado or "",
            debtor_document=cls.digits_only(dto.cpf),
            debtor_phone=dto.celular or "",
            due_date=normalize_due_date(dto.data_vencimento),
            billing_status=dto.situacao_boleto or "",
            vehicle_status=vehicle.situacao_veiculo or "",
            vehicle_model=vehicle.modelo or "",
            vehicle_plate=vehicle.placa or "",
            reference_month=(dto.mes_referente or "").strip(),
            raw_payload={
                "boleto": dto.model_dump(mode="json", exclude={"veiculos"}),
                "veiculo": vehicle.model_dump(mode="json"),
            },
        )
