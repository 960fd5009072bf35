# ╭────────────────────────────────────────────────────────────╮
# │  Links de consultor – emissão, listagem e resolução        │
# │                                                            │
# │  A resolução por slug / short code é pública (sem chave).  │
# ╰────────────────────────────────────────────────────────────╯
from __future__ import annotations

import structlog
from django.http import Http404, HttpResponseRedirect
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from boleto_sync.core.application.commands.link_commands import IssueConsultorLinksCommand
from boleto_sync.core.application.queries.link_queries import (
    ListConsultorLinksQuery,
    ResolveShortCodeQuery,
    ResolveSlugQuery,
)
from plugins.django_interface.serializers.boleto_serializers import (
    IssueLinksInputSerializer,
    ListLinksParamsSerializer,
)

from .base import DomainErrorMixin, command_bus, error_response, query_bus

logger = structlog.get_logger(__name__)


class ConsultorLinkListView(DomainErrorMixin, APIView):
    def get(self, request):
        ser = ListLinksParamsSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        params = ser.validated_data
        links = query_bus().dispatch(
            ListConsultorLinksQuery(client_id=str(params["client_id"]), period=params.get("period"))
        )
        return Response({"success": True, "data": [link.model_dump(mode="json") for link in links]})


class IssueConsultorLinksView(DomainErrorMixin, APIView):
    """Emite (ou reaproveita) os links da competência informada."""

    def post(self, request):
        ser = IssueLinksInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        links = command_bus().dispatch(
            IssueConsultorLinksCommand(client_id=str(data["client_id"]), period=data["period"])
        )
        return Response(
            {
                "success": True,
                "period": data["period"],
                "links_issued": len(links),
                "links": [link.model_dump(mode="json") for link in links],
            }
        )


# ───────────────────────────────────────────────
# Rotas públicas
# ───────────────────────────────────────────────
class _PublicLinkView(DomainErrorMixin, APIView):
    authentication_classes: list = []
    permission_classes = [AllowAny]

    def _respond(self, resolved):
        if resolved is None:
            return error_response("Não encontrado", "Link inválido ou expirado.", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": resolved.model_dump(mode="json")})


class ResolveSlugView(_PublicLinkView):
    def get(self, request, slug):
        return self._respond(query_bus().dispatch(ResolveSlugQuery(slug=slug)))


class ResolveShortCodeView(_PublicLinkView):
    def get(self, request, code):
        return self._respond(query_bus().dispatch(ResolveShortCodeQuery(short_code=code)))


def short_code_redirect(request, code):
    """`/app/s/<code>` → 302 para a URL completa do link."""
    resolved = query_bus().dispatch(ResolveShortCodeQuery(short_code=code))
    if resolved is None:
        logger.info("links.redirect_miss", short_code=code)
        raise Http404("Link não encontrado.")
    return HttpResponseRedirect(resolved.full_url)
