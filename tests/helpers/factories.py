"""Fábricas de dados para os testes (modelos + payloads no formato do SGA)."""

from __future__ import annotations

import itertools
from typing import Any
from unittest.mock import MagicMock

from boleto_sync.core.application.dtos.sga_dtos import SgaBoletoDetalheDTO, SgaBoletoDTO
from plugins.django_interface.models import ApiKey, Client, Consultant, FilterConfig

_seq = itertools.count(1)


def make_client(**kwargs: Any) -> Client:
    n = next(_seq)
    data = {
        "name": f"Cliente {n}",
        "bearer_token": f"token-{n}",
        "api_base_url": "https://sga.example.com/api/",
        "active": True,
        "logo_url": "https://cdn.example.com/logo.png",
    }
    data.update(kwargs)
    return Client.objects.create(**data)


def make_consultant(client: Client, code: str, **kwargs: Any) -> Consultant:
    data = {"name": f"Consultor {code}", "contact": "11987654321", "active": True}
    data.update(kwargs)
    return Consultant.objects.create(client=client, sga_consultant_code=code, **data)


def make_filter_config(client: Client, statuses: list[str]) -> FilterConfig:
    return FilterConfig.objects.create(client=client, accepted_vehicle_statuses=statuses)


def make_api_key(key: str = "test-api-key") -> ApiKey:
    return ApiKey.objects.create(key=key, description="testes")


def vehicle(code: str, status: str = "ATIVO", plate: str = "ABC1D23", model: str = "Onix") -> dict:
    return {"codigo_voluntario": code, "situacao_veiculo": status, "placa": plate, "modelo": model}


def sga_record(nosso_numero: str, vehicles: list[dict] | None = None, **kwargs: Any) -> dict:
    data = {
        "nosso_numero": nosso_numero,
        "linha_digitavel": f"23790.00000 {nosso_numero}",
        "valor_boleto": "150.00",
        "nome_associado": "Fulano de Tal",
        "cpf": "123.456.789-00",
        "celular": "(11) 98888-7777",
        "data_vencimento": "10/02/2026",
        "situacao_boleto": "ABERTO",
        "mes_referente": "02/2026",
        "veiculos": vehicles if vehicles is not None else [],
    }
    data.update(kwargs)
    return data


def fake_sga_factory(records: list[dict] | None = None, detail: list[dict] | None = None, error: Exception | None = None):
    """
    Substitui o SgaAPIClient: devolve uma fábrica (como o provider do
    container) e o mock criado, para inspeção das chamadas.
    """
    sga = MagicMock(name="SgaAPIClient")
    if error is not None:
        sga.fetch_boletos.side_effect = error
        sga.get_boleto_detail.side_effect = error
    else:
        sga.fetch_boletos.return_value = [SgaBoletoDTO.from_raw(r) for r in records or []]
        sga.get_boleto_detail.return_value = [SgaBoletoDetalheDTO.model_validate(d) for d in detail or []]
    factory = MagicMock(name="sga_client_factory", return_value=sga)
    return factory, sga
