from __future__ import annotations

from django.core.exceptions import ValidationError

from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity
from boleto_sync.core.domain.repositories.consultant_repository import ConsultantRepository
from plugins.django_interface.models import Consultant as ConsultantModel


class ConsultantRepoImpl(ConsultantRepository):
    def find_by_id(self, consultant_id) -> ConsultantEntity | None:
        try:
            return ConsultantEntity.from_model(ConsultantModel.objects.get(id=consultant_id))
        except (ConsultantModel.DoesNotExist, ValidationError, ValueError):
            return None

    def list_active_by_client(self, client_id) -> list[ConsultantEntity]:
        qs = ConsultantModel.objects.filter(client_id=client_id, active=True).order_by("name")
        return [ConsultantEntity.from_model(m) for m in qs]
