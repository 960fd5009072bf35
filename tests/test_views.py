"""Camada HTTP: autenticação por X-API-Key, mapeamento de erros e rotas públicas."""

from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, patch

from dependency_injector import providers
from django.conf import settings
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings
from boleto_sync.adapters.locks.client_sync_lock import ClientSyncLock
from boleto_sync.core.domain.exceptions import UpstreamConnectionError, UpstreamServerError
from plugins.django_interface.models import Boleto, Client, ConsultorLink
from tests.helpers.factories import (
    fake_sga_factory,
    make_api_key,
    make_client,
    make_consultant,
    sga_record,
    vehicle,
)

PDF_GET = "plugins.django_interface.views.boleto_views.requests.get"


class ApiTestCase(TestCase):
    def setUp(self):
        self.addCleanup(cache.clear)
        self.container = setup_di_container_from_settings(settings)
        self.api = APIClient()
        self.api.credentials(HTTP_X_API_KEY=make_api_key().key)
        self.client_obj = make_client()
        self.ana = make_consultant(self.client_obj, "10", name="Ana")

    def use_sga(self, records=None, detail=None, error=None):
        factory, sga = fake_sga_factory(records, detail, error)
        self.container.sga_client.override(providers.Callable(factory))
        self.addCleanup(self.container.sga_client.reset_override)
        return factory, sga

    def add_boleto(self, nn="123", **kwargs):
        data = {
            "client": self.client_obj,
            "consultant": self.ana,
            "nosso_numero": nn,
            "amount": Decimal("150.00"),
            "due_date": date(2026, 2, 10),
            "billing_status": "ABERTO",
            "reference_month": "02/2026",
        }
        data.update(kwargs)
        return Boleto.objects.create(**data)


class AuthenticationTests(ApiTestCase):
    def test_missing_or_invalid_key_is_401(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get("/api/boletos", {"client_id": str(self.client_obj.id)}).status_code, 401)

        anonymous.credentials(HTTP_X_API_KEY="errada")
        self.assertEqual(anonymous.get("/api/boletos", {"client_id": str(self.client_obj.id)}).status_code, 401)

    def test_inactive_key_is_401(self):
        inactive = make_api_key("desligada")
        inactive.active = False
        inactive.save()
        api = APIClient()
        api.credentials(HTTP_X_API_KEY="desligada")
        self.assertEqual(api.get("/api/consultor-links", {"client_id": str(self.client_obj.id)}).status_code, 401)

    def test_healthz_is_public(self):
        resp = APIClient().get("/api/healthz/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "ok")


class SyncEndpointTests(ApiTestCase):
    def test_sync_runs_and_returns_stats(self):
        self.use_sga([sga_record("1", [vehicle("10")]), sga_record("2", [])])
        resp = self.api.post(
            "/api/boletos/sync",
            {"client_id": str(self.client_obj.id), "start_date": "01/02/2026", "end_date": "28/02/2026"},
            format="json",
        )

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["period"]["billing_period"], "02/2026")
        self.assertEqual(body["stats"]["total_inserted"], 1)
        self.assertEqual(body["stats"]["rejected"]["no_vehicles"], 1)
        self.assertEqual(body["stats"]["total_rejected"], 1)
        self.assertEqual(body["stats"]["links_issued"], 1)
        self.assertTrue(body["stats"]["links"][0]["short_url"].startswith("https://central.example.com/app/s/"))

    def test_sync_defaults_to_current_month(self):
        _, sga = self.use_sga([])
        resp = self.api.post("/api/boletos/sync", {"client_id": str(self.client_obj.id)}, format="json")

        self.assertEqual(resp.status_code, 200)
        kwargs = sga.fetch_boletos.call_args.kwargs
        today = date.today()
        self.assertEqual(kwargs["start_date"], f"01/{today.month:02d}/{today.year}")
        self.assertEqual(kwargs["situation_code"], "2")

    def test_sync_validation(self):
        cases = [
            {},
            {"client_id": "nao-e-uuid"},
            {"client_id": str(self.client_obj.id), "start_date": "2026-02-01"},
            {"client_id": str(self.client_obj.id), "start_date": "10/02/2026", "end_date": "01/02/2026"},
        ]
        for payload in cases:
            with self.subTest(payload=payload):
                self.assertEqual(self.api.post("/api/boletos/sync", payload, format="json").status_code, 400)

    def test_domain_errors_map_to_status_codes(self):
        lonely = make_client()
        self.assertEqual(
            self.api.post("/api/boletos/sync", {"client_id": "6f1c3f0e-0000-4000-8000-000000000000"}, format="json").status_code,
            404,
        )
        resp = self.api.post("/api/boletos/sync", {"client_id": str(lonely.id)}, format="json")
        self.assertEqual(resp.status_code, 422)
        self.assertIn("message", resp.json())

        self.use_sga(error=UpstreamServerError("Erro interno no SGA (HTTP 500).", 500))
        resp = self.api.post("/api/boletos/sync", {"client_id": str(self.client_obj.id)}, format="json")
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["upstream_status"], 500)

    def test_connection_error_is_504(self):
        self.use_sga(error=UpstreamConnectionError("Timeout ao acessar o SGA"))
        resp = self.api.post("/api/boletos/sync", {"client_id": str(self.client_obj.id)}, format="json")
        self.assertEqual(resp.status_code, 504)

    def test_busy_client_is_409(self):
        self.use_sga([])
        cache.add(ClientSyncLock().key_for(str(self.client_obj.id)), "ocupado", 60)
        resp = self.api.post("/api/boletos/sync", {"client_id": str(self.client_obj.id)}, format="json")
        self.assertEqual(resp.status_code, 409)

    def test_run_async_enqueues_task(self):
        with patch("central_consultor_api.tasks.execute_boleto_sync_for_client.delay") as delay:
            delay.return_value = MagicMock(id="task-1")
            resp = self.api.post(
                "/api/boletos/sync",
                {"client_id": str(self.client_obj.id), "start_date": "01/02/2026", "end_date": "28/02/2026", "run_async": True},
                format="json",
            )

        self.assertEqual(resp.status_code, 202)
        self.assertEqual(resp.json()["task_id"], "task-1")
        delay.assert_called_once_with(str(self.client_obj.id), "01/02/2026", "28/02/2026", "2")


class BoletoEndpointTests(ApiTestCase):
    def test_list_requires_client_id(self):
        self.assertEqual(self.api.get("/api/boletos").status_code, 400)

    def test_list_paginates_with_logo(self):
        for i in range(3):
            self.add_boleto(str(i), due_date=date(2026, 2, 1 + i))
        resp = self.api.get("/api/boletos", {"client_id": str(self.client_obj.id), "limit": 2})

        body = resp.json()
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([b["nosso_numero"] for b in body["data"]], ["2", "1"])
        self.assertEqual(body["data"][0]["consultant_name"], "Ana")
        self.assertEqual(body["pagination"], {"page": 1, "limit": 2, "total": 3, "total_pages": 2})
        self.assertEqual(body["logo_url"], self.client_obj.logo_url)

    def test_retrieve_by_id(self):
        boleto = self.add_boleto(raw_payload={"boleto": {"nosso_numero": "123"}})
        resp = self.api.get(f"/api/boletos/{boleto.id}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["data"]["raw_payload"]["boleto"]["nosso_numero"], "123")

        self.assertEqual(self.api.get("/api/boletos/6f1c3f0e-0000-4000-8000-000000000000").status_code, 404)

    def test_sga_detail_persists_payment_info(self):
        self.add_boleto("123")
        self.use_sga(detail=[{"nosso_numero": "123", "link_boleto": "https://pdf.example.com/123", "pix": {"copia_cola": "000201PIX"}}])

        resp = self.api.get("/api/boletos/detail/123", {"client_id": str(self.client_obj.id)})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()[0]["link_boleto"], "https://pdf.example.com/123")
        row = Boleto.objects.get(nosso_numero="123")
        self.assertEqual(row.pix_copy_paste, "000201PIX")
        self.assertEqual(row.pdf_url, "https://pdf.example.com/123")

    def test_sga_detail_not_found_cases(self):
        self.use_sga(detail=[])
        self.assertEqual(self.api.get("/api/boletos/detail/999", {"client_id": str(self.client_obj.id)}).status_code, 404)
        self.add_boleto("123")
        self.assertEqual(self.api.get("/api/boletos/detail/123", {"client_id": str(self.client_obj.id)}).status_code, 404)
        self.assertEqual(self.api.get("/api/boletos/detail/123").status_code, 400)

    def test_pdf_is_streamed_as_attachment(self):
        self.add_boleto("123", pdf_url="https://pdf.example.com/123")
        upstream = MagicMock(status_code=200, headers={"Content-Type": "application/pdf"})
        upstream.iter_content.return_value = [b"%PDF-", b"1.4"]

        with patch(PDF_GET, return_value=upstream) as get:
            resp = self.api.get("/api/boletos/pdf/123", {"client_id": str(self.client_obj.id)})

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp["Content-Disposition"], 'attachment; filename="boleto-123.pdf"')
        self.assertEqual(b"".join(resp.streaming_content), b"%PDF-1.4")
        get.assert_called_once_with("https://pdf.example.com/123", stream=True, timeout=settings.PDF_PROXY_TIMEOUT)

    def test_pdf_upstream_failure_is_502(self):
        self.add_boleto("123", pdf_url="https://pdf.example.com/123")
        with patch(PDF_GET, return_value=MagicMock(status_code=500)):
            resp = self.api.get("/api/boletos/pdf/123", {"client_id": str(self.client_obj.id)})
        self.assertEqual(resp.status_code, 502)

    def test_pdf_for_other_consultant_is_404(self):
        bia = make_consultant(self.client_obj, "20", name="Bia")
        self.add_boleto("123", pdf_url="https://pdf.example.com/123")
        resp = self.api.get("/api/boletos/pdf/123", {"client_id": str(self.client_obj.id), "consultant_id": str(bia.id)})
        self.assertEqual(resp.status_code, 404)

    def test_consultant_summary(self):
        self.add_boleto("1", amount=Decimal("10.00"))
        self.add_boleto("2", amount=Decimal("15.50"), billing_status="PAGO")

        self.assertEqual(self.api.get(f"/api/consultants/{self.ana.id}/summary").status_code, 400)
        resp = self.api.get(f"/api/consultants/{self.ana.id}/summary", {"client_id": str(self.client_obj.id)})
        data = resp.json()["data"]
        self.assertEqual(data["total_boletos"], 2)
        self.assertEqual(data["total_amount"], 25.5)
        self.assertEqual(data["total_paid"], 1)


class ConsultorLinkEndpointTests(ApiTestCase):
    def _issue(self):
        self.add_boleto("1")
        resp = self.api.post(
            "/api/consultor-links/issue", {"client_id": str(self.client_obj.id), "period": "02/2026"}, format="json"
        )
        self.assertEqual(resp.status_code, 200)
        return resp.json()["links"][0]

    def test_issue_and_list(self):
        link = self._issue()
        resp = self.api.get("/api/consultor-links", {"client_id": str(self.client_obj.id)})
        self.assertEqual([item["slug"] for item in resp.json()["data"]], [link["slug"]])

    def test_issue_rejects_bad_period(self):
        resp = self.api.post(
            "/api/consultor-links/issue", {"client_id": str(self.client_obj.id), "period": "2/2026"}, format="json"
        )
        self.assertEqual(resp.status_code, 400)

    def test_public_resolution_needs_no_key(self):
        link = self._issue()
        public = APIClient()

        by_slug = public.get(f"/api/consultor-link/{link['slug']}")
        self.assertEqual(by_slug.status_code, 200)
        self.assertEqual(by_slug.json()["data"]["consultant_name"], "Ana")

        by_code = public.get(f"/api/consultor-link/s/{link['short_code'].lower()}")
        self.assertEqual(by_code.status_code, 200)
        self.assertEqual(by_code.json()["data"]["slug"], link["slug"])

        self.assertEqual(public.get("/api/consultor-link/desconhecido").status_code, 404)
        self.assertEqual(public.get("/api/consultor-link/s/ZZZZZZ").status_code, 404)

    def test_short_code_redirect(self):
        link = self._issue()
        resp = self.client.get(f"/app/s/{link['short_code']}")
        self.assertEqual(resp.status_code, 302)
        self.assertEqual(resp["Location"], ConsultorLink.objects.get().full_url)
        self.assertEqual(self.client.get("/app/s/ZZZZZZ").status_code, 404)


class CrudEndpointTests(ApiTestCase):
    def test_client_crud_hides_token(self):
        resp = self.api.post(
            "/api/clients",
            {"name": "Nova", "bearer_token": "segredo", "api_base_url": "https://sga.nova.com/api/"},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertNotIn("bearer_token", resp.json())
        self.assertEqual(Client.objects.get(name="Nova").bearer_token, "segredo")

        listing = self.api.get("/api/clients").json()
        self.assertEqual(listing["total_items"], 2)

    def test_consultant_filtered_by_client(self):
        other = make_client()
        make_consultant(other, "77")
        resp = self.api.get("/api/consultants", {"client_id": str(self.client_obj.id)})
        self.assertEqual([c["sga_consultant_code"] for c in resp.json()["results"]], ["10"])

    def test_filter_config_dedupes_statuses(self):
        resp = self.api.post(
            "/api/filter-configs",
            {"client": str(self.client_obj.id), "accepted_vehicle_statuses": ["ATIVO", "ATIVO", "INADIMPLENTE"]},
            format="json",
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["accepted_vehicle_statuses"], ["ATIVO", "INADIMPLENTE"])
