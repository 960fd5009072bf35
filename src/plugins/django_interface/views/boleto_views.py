# ╭────────────────────────────────────────────────────────────────────────────╮
# │  Boletos – sincronização, listagem, detalhe SGA, PDF e resumo             │
# │                                                                            │
# │  Todas as rotas exigem X-API-Key (ApiKeyAuthentication + HasValidApiKey). │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from dataclasses import asdict

import requests
import structlog
from django.conf import settings
from django.http import StreamingHttpResponse
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from boleto_sync.core.application.commands.boleto_commands import RefreshBoletoDetailCommand
from boleto_sync.core.application.commands.sync_commands import SyncBoletosCommand
from boleto_sync.core.application.queries.boleto_queries import (
    GetBoletoByNossoNumeroQuery,
    GetBoletoQuery,
    GetConsultantSummaryQuery,
    ListBoletosQuery,
)
from boleto_sync.core.utils.date_utils import current_month_range, parse_br_date
from plugins.django_interface.serializers.boleto_serializers import (
    BoletoDetailSerializer,
    BoletoSerializer,
    ClientScopedParamsSerializer,
    ListBoletosParamsSerializer,
    SyncBoletosInputSerializer,
)

from .base import DomainErrorMixin, command_bus, error_response, query_bus

logger = structlog.get_logger(__name__)


# ╭──────────────────────────────────────────────╮
# │ POST /api/boletos/sync                       │
# ╰──────────────────────────────────────────────╯
class SyncBoletosView(DomainErrorMixin, APIView):
    """
    Sincroniza os boletos de um cliente. Sem datas ⇒ mês corrente.
    `run_async=true` enfileira a task Celery e responde 202.
    """

    def post(self, request):
        ser = SyncBoletosInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        default_start, default_end = current_month_range()
        start_date = data.get("start_date") or default_start
        end_date = data.get("end_date") or default_end
        if parse_br_date(start_date) > parse_br_date(end_date):
            return error_response(
                "Erro de validação", "start_date deve ser anterior ou igual a end_date.", status.HTTP_400_BAD_REQUEST
            )
        situation_code = data.get("situation_code") or settings.SGA_DEFAULT_SITUATION_CODE
        client_id = str(data["client_id"])

        if data.get("run_async"):
            from central_consultor_api.tasks import execute_boleto_sync_for_client

            result = execute_boleto_sync_for_client.delay(client_id, start_date, end_date, situation_code)
            return Response(
                {"success": True, "message": "Sincronização enfileirada.", "task_id": result.id},
                status=status.HTTP_202_ACCEPTED,
            )

        stats = command_bus().dispatch(
            SyncBoletosCommand(
                client_id=client_id,
                start_date=start_date,
                end_date=end_date,
                situation_code=situation_code,
            )
        )
        return Response(
            {
                "success": True,
                "message": "Sincronização concluída com sucesso.",
                "period": {"start_date": start_date, "end_date": end_date, "billing_period": stats.period},
                "stats": stats.as_response(),
            },
            status=status.HTTP_200_OK,
        )


# ╭──────────────────────────────────────────────╮
# │ GET /api/boletos                             │
# ╰──────────────────────────────────────────────╯
class BoletoListView(DomainErrorMixin, APIView):
    def get(self, request):
        ser = ListBoletosParamsSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        params = ser.validated_data

        filtros = {
            "client_id": params["client_id"],
            "consultant_id": params.get("consultant_id"),
            "billing_status": params.get("billing_status"),
            "start_date": parse_br_date(params["start_date"]) if params.get("start_date") else None,
            "end_date": parse_br_date(params["end_date"]) if params.get("end_date") else None,
        }
        result = query_bus().dispatch(
            ListBoletosQuery(filtros=filtros, page=params["page"], page_size=params["limit"])
        )
        return Response(
            {
                "success": True,
                "data": BoletoSerializer([asdict(b) for b in result.items], many=True).data,
                "logo_url": result.extra.get("logo_url"),
                "pagination": {
                    "page": result.page,
                    "limit": result.page_size,
                    "total": result.total,
                    "total_pages": result.total_pages,
                },
            }
        )


# ╭──────────────────────────────────────────────╮
# │ GET /api/boletos/<uuid>                      │
# ╰──────────────────────────────────────────────╯
class BoletoDetailView(DomainErrorMixin, APIView):
    def get(self, request, boleto_id):
        boleto = query_bus().dispatch(GetBoletoQuery(boleto_id=str(boleto_id)))
        if boleto is None:
            return error_response("Não encontrado", "Boleto não encontrado.", status.HTTP_404_NOT_FOUND)
        return Response({"success": True, "data": BoletoDetailSerializer(asdict(boleto)).data})


def _local_boleto(params: dict, nosso_numero: str):
    """Boleto local do cliente (e do consultor, se informado)."""
    boleto = query_bus().dispatch(
        GetBoletoByNossoNumeroQuery(client_id=str(params["client_id"]), nosso_numero=nosso_numero)
    )
    consultant_id = params.get("consultant_id")
    if boleto is not None and consultant_id and str(boleto.consultant_id) != str(consultant_id):
        return None
    return boleto


# ╭──────────────────────────────────────────────╮
# │ GET /api/boletos/detail/<nosso_numero>       │
# ╰──────────────────────────────────────────────╯
class BoletoSgaDetailView(DomainErrorMixin, APIView):
    """Proxy do detalhe no SGA; grava PIX e link do PDF no boleto local."""

    def get(self, request, nosso_numero):
        ser = ClientScopedParamsSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        params = ser.validated_data

        if _local_boleto(params, nosso_numero) is None:
            return error_response(
                "Não encontrado", "Boleto não encontrado para este cliente.", status.HTTP_404_NOT_FOUND
            )

        items = command_bus().dispatch(
            RefreshBoletoDetailCommand(client_id=str(params["client_id"]), nosso_numero=nosso_numero)
        )
        if not items:
            return error_response("Não encontrado", "Boleto não encontrado no SGA.", status.HTTP_404_NOT_FOUND)
        return Response(items)


# ╭──────────────────────────────────────────────╮
# │ GET /api/boletos/pdf/<nosso_numero>          │
# ╰──────────────────────────────────────────────╯
class BoletoPdfView(DomainErrorMixin, APIView):
    """
    Repasse do PDF hospedado externamente. Se o link ainda não foi
    obtido, consulta o detalhe no SGA antes.
    """

    chunk_size = 64 * 1024

    def get(self, request, nosso_numero):
        ser = ClientScopedParamsSerializer(data=request.query_params)
        ser.is_valid(raise_exception=True)
        params = ser.validated_data

        boleto = _local_boleto(params, nosso_numero)
        if boleto is None:
            return error_response("Não encontrado", "Boleto não encontrado.", status.HTTP_404_NOT_FOUND)

        pdf_url = boleto.pdf_url
        if not pdf_url:
            command_bus().dispatch(
                RefreshBoletoDetailCommand(client_id=str(params["client_id"]), nosso_numero=nosso_numero)
            )
            refreshed = _local_boleto(params, nosso_numero)
            pdf_url = refreshed.pdf_url if refreshed else None
        if not pdf_url:
            return error_response("Não encontrado", "Link do PDF não disponível.", status.HTTP_404_NOT_FOUND)

        try:
            upstream = requests.get(pdf_url, stream=True, timeout=settings.PDF_PROXY_TIMEOUT)
        except requests.RequestException as exc:
            logger.warning("boleto.pdf.upstream_unreachable", nosso_numero=nosso_numero, error=str(exc))
            return error_response(
                "Erro ao obter PDF", "O servidor do boleto não respondeu.", status.HTTP_502_BAD_GATEWAY
            )
        if upstream.status_code != 200:
            upstream.close()
            logger.warning("boleto.pdf.upstream_status", nosso_numero=nosso_numero, status=upstream.status_code)
            return error_response(
                "Erro ao obter PDF", "O servidor do boleto não respondeu.", status.HTTP_502_BAD_GATEWAY
            )

        response = StreamingHttpResponse(
            upstream.iter_content(chunk_size=self.chunk_size),
            content_type=upstream.headers.get("Content-Type", "application/pdf"),
        )
        response["Content-Disposition"] = f'attachment; filename="boleto-{nosso_numero}.pdf"'
        return response


# ╭──────────────────────────────────────────────╮
# │ GET /api/consultants/<uuid>/summary          │
# ╰──────────────────────────────────────────────╯
class ConsultantSummaryView(DomainErrorMixin, APIView):
    def get(self, request, consultant_id):
        client_id = request.query_params.get("client_id")
        if not client_id:
            return error_response(
                "Erro de validação", "O parâmetro client_id é obrigatório.", status.HTTP_400_BAD_REQUEST
            )
        ser = ClientScopedParamsSerializer(data={"client_id": client_id})
        ser.is_valid(raise_exception=True)
        summary = query_bus().dispatch(
            GetConsultantSummaryQuery(client_id=str(ser.validated_data["client_id"]), consultant_id=str(consultant_id))
        )
        summary["total_amount"] = float(summary["total_amount"])
        return Response({"success": True, "data": summary})
