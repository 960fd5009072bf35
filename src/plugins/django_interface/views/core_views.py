# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – Cadastros (clientes, consultores, filtro de situações)   │
# │                                                                            │
# │  • Filtro seguro   → apenas chaves conhecidas chegam ao queryset           │
# │  • Paginação DRY   → mix-in centralizado                                   │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

import math

import structlog
from django.db import DatabaseError, connection
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from plugins.django_interface.models import Client, Consultant, FilterConfig

from ..serializers.core_serializers import (
    ClientSerializer,
    ConsultantSerializer,
    FilterConfigSerializer,
)

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Helper mix-in – paginação + filtros                                      │
# ╰──────────────────────────────────────────────────────────────────────────╯
class PaginationFilterMixin:
    """Filtra por `filter_fields` presentes na querystring e pagina o resultado."""

    filter_fields: tuple[str, ...] = ()

    @staticmethod
    def _pagination(request) -> tuple[int, int]:
        try:
            page = max(int(request.query_params.get("page", 1)), 1)
            size = int(request.query_params.get("page_size", DEFAULT_PAGE_SIZE))
        except ValueError:
            return 1, DEFAULT_PAGE_SIZE
        return page, min(max(size, 1), MAX_PAGE_SIZE)

    def _filters(self, request) -> dict[str, str]:
        return {
            key: request.query_params[key]
            for key in self.filter_fields
            if request.query_params.get(key) not in (None, "")
        }

    def list(self, request, *args, **kwargs):
        qs = self.get_queryset().filter(**self._filters(request))
        page, page_size = self._pagination(request)

        total_items = qs.count()
        total_pages = math.ceil(total_items / page_size) if page_size > 0 else 1
        offset = (page - 1) * page_size
        items = list(qs[offset : offset + page_size])

        payload = {
            "results": self.get_serializer(items, many=True).data,
            "total_items": total_items,
            "page": page,
            "page_size": page_size,
            "total_pages": total_pages,
            "items_on_page": len(items),
        }
        return Response(payload, status=status.HTTP_200_OK)


class ClientViewSet(PaginationFilterMixin, viewsets.ModelViewSet):
    queryset = Client.objects.all().order_by("name")
    serializer_class = ClientSerializer
    filter_fields = ("active",)

    def perform_create(self, serializer):
        client = serializer.save()
        logger.info("client.created", client_id=str(client.id), name=client.name)


class ConsultantViewSet(PaginationFilterMixin, viewsets.ModelViewSet):
    queryset = Consultant.objects.select_related("client").order_by("name")
    serializer_class = ConsultantSerializer
    filter_fields = ("client_id", "active", "sga_consultant_code")


class FilterConfigViewSet(PaginationFilterMixin, viewsets.ModelViewSet):
    queryset = FilterConfig.objects.select_related("client").order_by("client__name")
    serializer_class = FilterConfigSerializer
    filter_fields = ("client_id",)

    def perform_update(self, serializer):
        cfg = serializer.save()
        logger.info(
            "filter_config.updated",
            client_id=str(cfg.client_id),
            accepted=cfg.accepted_vehicle_statuses,
        )


class HealthCheckView(APIView):
    """
    Rota GET /api/healthz/: 200 se a API e o banco respondem, 503 caso contrário.
    """
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
        except DatabaseError as exc:
            logger.error("healthz.database_unavailable", error=str(exc))
            return Response({"status": "error", "database": "unavailable"}, status=status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response({"status": "ok", "database": "ok"}, status=status.HTTP_200_OK)
