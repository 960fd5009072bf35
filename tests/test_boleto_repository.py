"""Armazenamento de boletos: upsert idempotente, listagem, resumo e consultores da competência."""

import uuid
from datetime import date, timedelta
from decimal import Decimal

from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase

from boleto_sync.adapters.repositories.boleto_repo_impl import BoletoRepoImpl
from boleto_sync.core.domain.entities.boleto_entity import BoletoEntity, UpsertOutcome
from plugins.django_interface.models import Boleto
from tests.helpers.factories import make_client, make_consultant


class BoletoRepositoryTests(TestCase):
    def setUp(self):
        self.repo = BoletoRepoImpl()
        self.client_obj = make_client()
        self.ana = make_consultant(self.client_obj, "10", name="Ana")
        self.bia = make_consultant(self.client_obj, "20", name="Bia")

    def _entity(self, nn, consultant=None, **kwargs):
        data = {
            "client_id": self.client_obj.id,
            "consultant_id": (consultant or self.ana).id,
            "nosso_numero": nn,
            "amount": Decimal("100.00"),
            "due_date": date(2026, 2, 10),
            "billing_status": "ABERTO",
            "reference_month": "02/2026",
        }
        data.update(kwargs)
        return BoletoEntity(**data)

    def test_upsert_is_idempotent_on_natural_key(self):
        self.assertEqual(self.repo.upsert(self._entity("1")), UpsertOutcome.INSERTED)
        outcome = self.repo.upsert(self._entity("1", consultant=self.bia, amount=Decimal("120.50"), billing_status="PAGO"))

        self.assertEqual(outcome, UpsertOutcome.UPDATED)
        self.assertEqual(Boleto.objects.count(), 1)
        row = Boleto.objects.get()
        self.assertEqual(row.amount, Decimal("120.50"))
        self.assertEqual(row.billing_status, "PAGO")
        self.assertEqual(row.consultant_id, self.bia.id)

    def test_concurrent_insert_is_recovered_as_update(self):
        # a outra execução já gravou a chave; o SELECT desta não a viu e o INSERT colide
        self.repo.upsert(self._entity("1"))
        second = self._entity("1", consultant=self.bia, amount=Decimal("99.90"), billing_status="VENCIDO")

        with patch.object(Boleto.objects, "update_or_create", side_effect=IntegrityError("duplicate key")):
            outcome = self.repo.upsert(second)

        self.assertEqual(outcome, UpsertOutcome.UPDATED)
        self.assertEqual(Boleto.objects.count(), 1)
        row = Boleto.objects.get()
        self.assertEqual(row.amount, Decimal("99.90"))
        self.assertEqual(row.billing_status, "VENCIDO")
        self.assertEqual(row.consultant_id, self.bia.id)
        self.assertEqual(second.id, row.id)

    def test_integrity_error_without_existing_row_propagates(self):
        with patch.object(Boleto.objects, "update_or_create", side_effect=IntegrityError("fk")):
            with self.assertRaises(IntegrityError):
                self.repo.upsert(self._entity("1"))
        self.assertEqual(Boleto.objects.count(), 0)

    def test_same_nosso_numero_in_other_client_is_independent(self):
        other = make_client()
        other_consultant = make_consultant(other, "10")
        self.repo.upsert(self._entity("1"))
        outcome = self.repo.upsert(
            BoletoEntity(client_id=other.id, consultant_id=other_consultant.id, nosso_numero="1")
        )
        self.assertEqual(outcome, UpsertOutcome.INSERTED)
        self.assertEqual(Boleto.objects.count(), 2)

    def test_upsert_keeps_payment_info(self):
        self.repo.upsert(self._entity("1"))
        self.repo.update_payment_info(self.client_obj.id, "1", pix_copy_paste="000201", pdf_url="https://pdf/1")
        self.repo.upsert(self._entity("1", amount=Decimal("5.00")))

        row = Boleto.objects.get()
        self.assertEqual(row.pix_copy_paste, "000201")
        self.assertEqual(row.pdf_url, "https://pdf/1")

    def test_find_by_id_includes_names(self):
        entity = self._entity("1")
        self.repo.upsert(entity)
        found = self.repo.find_by_id(entity.id)

        self.assertEqual(found.consultant_name, "Ana")
        self.assertEqual(found.client_name, self.client_obj.name)
        self.assertIsNone(self.repo.find_by_id(uuid.uuid4()))
        self.assertEqual(self.repo.find_by_natural_key(self.client_obj.id, "1").id, entity.id)
        self.assertIsNone(self.repo.find_by_natural_key(self.client_obj.id, "2"))

    def test_list_orders_by_due_date_desc_and_filters(self):
        base = date(2026, 2, 1)
        for i in range(5):
            self.repo.upsert(self._entity(str(i), due_date=base + timedelta(days=i)))
        self.repo.upsert(self._entity("9", consultant=self.bia, billing_status="PAGO", due_date=base))

        page = self.repo.list({"client_id": self.client_obj.id}, page=1, page_size=3)
        self.assertEqual(page.total, 6)
        self.assertEqual(page.total_pages, 2)
        self.assertEqual([b.nosso_numero for b in page.items], ["4", "3", "2"])
        self.assertEqual(page.extra["logo_url"], self.client_obj.logo_url)

        only_bia = self.repo.list({"client_id": self.client_obj.id, "consultant_id": self.bia.id}, 1, 50)
        self.assertEqual([b.nosso_numero for b in only_bia.items], ["9"])

        ranged = self.repo.list(
            {"client_id": self.client_obj.id, "start_date": date(2026, 2, 2), "end_date": date(2026, 2, 3)}, 1, 50
        )
        self.assertEqual({b.nosso_numero for b in ranged.items}, {"1", "2"})

        paid = self.repo.list({"client_id": self.client_obj.id, "billing_status": "PAGO"}, 1, 50)
        self.assertEqual(paid.total, 1)

    def test_list_requires_client(self):
        with self.assertRaises(ValueError):
            self.repo.list({}, 1, 50)

    def test_consultant_summary(self):
        self.repo.upsert(self._entity("1", amount=Decimal("10.00")))
        self.repo.upsert(self._entity("2", amount=Decimal("20.00"), billing_status="PAGO"))
        self.repo.upsert(self._entity("3", amount=Decimal("30.00"), billing_status="VENCIDO"))

        summary = self.repo.consultant_summary(self.client_obj.id, self.ana.id)
        self.assertEqual(summary["total_boletos"], 3)
        self.assertEqual(summary["total_amount"], Decimal("60.00"))
        self.assertEqual((summary["total_open"], summary["total_paid"], summary["total_overdue"]), (1, 1, 1))

    def test_distinct_consultants_for_period(self):
        self.repo.upsert(self._entity("1"))
        self.repo.upsert(self._entity("2"))
        # sem mes_referente: entra pelo vencimento
        self.repo.upsert(self._entity("3", consultant=self.bia, reference_month="", due_date=date(2026, 2, 27)))
        # outra competência
        carla = make_consultant(self.client_obj, "30", name="Carla")
        self.repo.upsert(self._entity("4", consultant=carla, reference_month="03/2026", due_date=date(2026, 2, 5)))

        consultants = self.repo.distinct_consultants_for_period(self.client_obj.id, "02/2026")
        self.assertEqual([c.name for c in consultants], ["Ana", "Bia"])
        self.assertEqual(self.repo.distinct_consultants_for_period(self.client_obj.id, "01/2026"), [])
