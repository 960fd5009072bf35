from __future__ import annotations

from boleto_sync.core.domain.entities.filter_config_entity import FilterConfigEntity
from boleto_sync.core.domain.repositories.filter_config_repository import FilterConfigRepository
from plugins.django_interface.models import FilterConfig as FilterConfigModel


class FilterConfigRepoImpl(FilterConfigRepository):
    def get_for_client(self, client_id) -> FilterConfigEntity:
        model = FilterConfigModel.objects.filter(client_id=client_id).first()
        if model is None:
            return FilterConfigEntity(client_id=client_id)
        statuses = model.accepted_vehicle_statuses
        if not isinstance(statuses, list):
            statuses = []
        return FilterConfigEntity(client_id=client_id, accepted_vehicle_statuses=statuses)
