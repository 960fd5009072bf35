from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from boleto_sync.core.application.dtos.sga_dtos import SgaBoletoDTO, SgaVeiculoDTO
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class EligibleVehicle:
    consultant: ConsultantEntity
    vehicle: SgaVeiculoDTO


@dataclass(slots=True)
class EligibilityResult:
    eligible: list[EligibleVehicle] = field(default_factory=list)
    rejections: Counter = field(default_factory=Counter)


class EligibilityFilter:
    """
    Decide, por boleto, quais veículos pertencem a um consultor ativo
    do cliente e possuem situação aceita.

    Um boleto cujos veículos elegíveis apontam para consultores
    diferentes é rejeitado como `ambiguous_consultant`: a chave natural
    é do boleto, não do veículo.
    """

    def evaluate(
        self,
        record: SgaBoletoDTO,
        accepted_statuses: frozenset[str],
        consultants_by_code: Mapping[str, ConsultantEntity],
    ) -> EligibilityResult:
        result = EligibilityResult()

        if not record.veiculos:
            result.rejections["no_vehicles"] += 1
            return result

        for vehicle in record.veiculos:
            if vehicle.situacao_veiculo not in accepted_statuses:
                result.rejections["status_rejected"] += 1
                continue
            consultant = consultants_by_code.get(vehicle.codigo_voluntario or "")
            if consultant is None:
                result.rejections["consultant_unmatched"] += 1
                continue
            result.eligible.append(EligibleVehicle(consultant=consultant, vehicle=vehicle))

        distinct = {ev.consultant.id for ev in result.eligible}
        if len(distinct) > 1:
            logger.warning(
                "eligibility.ambiguous_consultant",
                nosso_numero=record.nosso_numero,
                consultant_ids=sorted(str(c) for c in distinct),
            )
            result.eligible = []
            result.rejections["ambiguous_consultant"] += 1

        return result
