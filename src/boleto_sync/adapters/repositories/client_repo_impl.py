from __future__ import annotations

from django.core.exceptions import ValidationError

from boleto_sync.core.domain.entities.client_entity import ClientEntity
from boleto_sync.core.domain.repositories.client_repository import ClientRepository
from plugins.django_interface.models import Client as ClientModel


class ClientRepoImpl(ClientRepository):
    def find_by_id(self, client_id) -> ClientEntity | None:
        try:
            return ClientEntity.from_model(ClientModel.objects.get(id=client_id))
        except (ClientModel.DoesNotExist, ValidationError, ValueError):
            return None

    def list_active(self) -> list[ClientEntity]:
        return [ClientEntity.from_model(m) for m in ClientModel.objects.filter(active=True).order_by("name")]
