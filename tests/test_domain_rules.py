"""Regras puras: datas/competência, filtro de elegibilidade, mapeamento SGA e tokens de link."""

import uuid
from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase

from boleto_sync.core.application.dtos.sga_dtos import SgaBoletoDTO
from boleto_sync.core.application.services.eligibility_filter import EligibilityFilter
from boleto_sync.core.domain.entities.consultant_entity import ConsultantEntity
from boleto_sync.core.domain.entities.filter_config_entity import FilterConfigEntity
from boleto_sync.core.domain.exceptions import InvalidDateError, InvalidPeriodError, MalformedRecordError
from boleto_sync.core.domain.mappers.sga_payload_mapper import SgaPayloadMapper
from boleto_sync.core.domain.services import link_token_service as tokens
from boleto_sync.core.utils.date_utils import (
    current_month_range,
    normalize_due_date,
    parse_br_date,
    period_bounds,
    period_from_date,
    validate_period,
)
from boleto_sync.core.utils.phone_utils import format_br_phone
from tests.helpers.factories import sga_record, vehicle


class DateUtilsTests(SimpleTestCase):
    def test_parse_br_date_is_strict(self):
        self.assertEqual(parse_br_date("01/02/2026"), date(2026, 2, 1))
        for bad in ("31/02/2026", "2026-02-01", "1/2/2026", "", None):
            with self.subTest(value=bad), self.assertRaises(InvalidDateError):
                parse_br_date(bad)

    def test_normalize_due_date(self):
        self.assertEqual(normalize_due_date("2026-02-10"), date(2026, 2, 10))
        self.assertEqual(normalize_due_date("10/02/2026"), date(2026, 2, 10))
        self.assertEqual(normalize_due_date("2026-02-10 00:00:00"), date(2026, 2, 10))
        for empty in (None, "", "0000-00-00", "00/00/0000", "amanhã", "2026-02-31"):
            with self.subTest(value=empty):
                self.assertIsNone(normalize_due_date(empty))

    def test_period_helpers(self):
        self.assertEqual(period_from_date("15/03/2026"), "03/2026")
        self.assertEqual(period_bounds("02/2024"), (date(2024, 2, 1), date(2024, 2, 29)))
        self.assertEqual(current_month_range(date(2026, 4, 17)), ("01/04/2026", "30/04/2026"))
        for bad in ("13/2026", "2/2026", "02-2026"):
            with self.subTest(value=bad), self.assertRaises(InvalidPeriodError):
                validate_period(bad)


class EligibilityFilterTests(SimpleTestCase):
    def setUp(self):
        client_id = uuid.uuid4()
        self.ana = ConsultantEntity(id=uuid.uuid4(), client_id=client_id, name="Ana", sga_consultant_code="10")
        self.bia = ConsultantEntity(id=uuid.uuid4(), client_id=client_id, name="Bia", sga_consultant_code="20")
        self.by_code = {"10": self.ana, "20": self.bia}
        self.accepted = frozenset({"ATIVO"})
        self.filter = EligibilityFilter()

    def _evaluate(self, vehicles):
        record = SgaBoletoDTO.model_validate(sga_record("1", vehicles))
        return self.filter.evaluate(record, self.accepted, self.by_code)

    def test_accepted_vehicle_of_known_consultant(self):
        result = self._evaluate([vehicle("10")])
        self.assertEqual([ev.consultant for ev in result.eligible], [self.ana])
        self.assertEqual(sum(result.rejections.values()), 0)

    def test_record_without_vehicles(self):
        result = self._evaluate([])
        self.assertEqual(result.eligible, [])
        self.assertEqual(result.rejections["no_vehicles"], 1)

    def test_rejections_are_counted_per_vehicle(self):
        result = self._evaluate([vehicle("10", status="CANCELADO"), vehicle("99"), vehicle("10")])
        self.assertEqual(len(result.eligible), 1)
        self.assertEqual(result.rejections["status_rejected"], 1)
        self.assertEqual(result.rejections["consultant_unmatched"], 1)

    def test_status_match_is_exact(self):
        result = self._evaluate([vehicle("10", status="ativo")])
        self.assertEqual(result.eligible, [])
        self.assertEqual(result.rejections["status_rejected"], 1)

    def test_two_consultants_on_same_record_is_ambiguous(self):
        result = self._evaluate([vehicle("10"), vehicle("20")])
        self.assertEqual(result.eligible, [])
        self.assertEqual(result.rejections["ambiguous_consultant"], 1)

    def test_same_consultant_on_several_vehicles_is_not_ambiguous(self):
        result = self._evaluate([vehicle("10", plate="AAA"), vehicle("10", plate="BBB")])
        self.assertEqual(len(result.eligible), 2)
        self.assertEqual(result.rejections["ambiguous_consultant"], 0)

    def test_empty_filter_config_defaults_to_ativo(self):
        self.assertEqual(FilterConfigEntity(client_id=uuid.uuid4()).accepted_set(), frozenset({"ATIVO"}))
        cfg = FilterConfigEntity(client_id=uuid.uuid4(), accepted_vehicle_statuses=[" ATIVO", "INADIMPLENTE", ""])
        self.assertEqual(cfg.accepted_set(), frozenset({"ATIVO", "INADIMPLENTE"}))


class SgaPayloadMapperTests(SimpleTestCase):
    def test_maps_record_and_vehicle(self):
        dto = SgaBoletoDTO.model_validate(
            sga_record("000123", [vehicle("10", plate="XYZ9A87", model="HB20")], valor_boleto="1.234,56")
        )
        client_id, consultant_id = uuid.uuid4(), uuid.uuid4()
        entity = SgaPayloadMapper.map_boleto(dto, client_id=client_id, consultant_id=consultant_id, vehicle=dto.veiculos[0])

        self.assertEqual(entity.nosso_numero, "000123")
        self.assertEqual(entity.amount, Decimal("1234.56"))
        self.assertEqual(entity.debtor_document, "12345678900")
        self.assertEqual(entity.due_date, date(2026, 2, 10))
        self.assertEqual(entity.vehicle_plate, "XYZ9A87")
        self.assertEqual(entity.vehicle_model, "HB20")
        self.assertEqual(entity.reference_month, "02/2026")
        self.assertEqual(entity.raw_payload["veiculo"]["placa"], "XYZ9A87")
        self.assertNotIn("veiculos", entity.raw_payload["boleto"])

    def test_amounts(self):
        self.assertEqual(SgaPayloadMapper.parse_amount("99.9"), Decimal("99.90"))
        self.assertEqual(SgaPayloadMapper.parse_amount(None), Decimal("0"))
        self.assertEqual(SgaPayloadMapper.parse_amount("abc"), Decimal("0"))

    def test_missing_nosso_numero_is_malformed(self):
        dto = SgaBoletoDTO.model_validate(sga_record("  ", [vehicle("10")]))
        with self.assertRaises(MalformedRecordError):
            SgaPayloadMapper.map_boleto(dto, client_id=uuid.uuid4(), consultant_id=uuid.uuid4(), vehicle=dto.veiculos[0])


class LinkTokenTests(SimpleTestCase):
    def test_short_code_shape(self):
        for _ in range(50):
            code = tokens.generate_short_code()
            self.assertEqual(len(code), 6)
            self.assertTrue(set(code) <= set(tokens.SHORT_CODE_ALPHABET))
        self.assertEqual(len(set(tokens.SHORT_CODE_ALPHABET)), 32)
        self.assertFalse(set("01IO") & set(tokens.SHORT_CODE_ALPHABET))

    def test_slug_is_long_and_hex(self):
        slug = tokens.generate_slug()
        self.assertEqual(len(slug), 40)
        int(slug, 16)

    def test_normalize_short_code(self):
        self.assertEqual(tokens.normalize_short_code(" abc234 "), "ABC234")
        for bad in ("ABC23", "ABC2345", "ABC10O", "", None, 123456):
            with self.subTest(value=bad):
                self.assertIsNone(tokens.normalize_short_code(bad))

    def test_urls(self):
        self.assertEqual(tokens.build_full_url("https://x.com/", "ab"), "https://x.com/app/?token=ab")
        self.assertEqual(tokens.build_full_url("", "ab"), "/app/?token=ab")
        self.assertEqual(tokens.build_short_url("https://x.com", "ABC234"), "https://x.com/app/s/ABC234")
        self.assertIsNone(tokens.build_short_url("https://x.com", None))


class PhoneFormatTests(SimpleTestCase):
    def test_formats(self):
        self.assertEqual(format_br_phone("11987654321"), "(11) 98765-4321")
        self.assertEqual(format_br_phone("(11) 3456-7890"), "(11) 3456-7890")
        self.assertEqual(format_br_phone("+1 555"), "+1 555")
        self.assertEqual(format_br_phone(None), "—")


class BusTests(SimpleTestCase):
    def test_dispatch_routes_by_type(self):
        from unittest.mock import MagicMock

        from boleto_sync.core.application.commands.link_commands import RebuildLinkUrlsCommand
        from boleto_sync.core.application.cqrs import CommandBus, HandlerNotRegisteredError

        bus = CommandBus()
        handler = MagicMock()
        handler.handle.return_value = 3
        bus.register(RebuildLinkUrlsCommand, handler)

        cmd = RebuildLinkUrlsCommand(base_url="https://x")
        self.assertEqual(bus.dispatch(cmd), 3)
        handler.handle.assert_called_once_with(cmd)

        with self.assertRaises(HandlerNotRegisteredError):
            bus.dispatch(object())
