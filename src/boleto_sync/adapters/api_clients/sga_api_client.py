from __future__ import annotations

from datetime import date
from typing import Any
from urllib.parse import quote

import structlog

from boleto_sync.adapters.api_clients.base_api_client import BaseAPIClient
from boleto_sync.core.application.dtos.sga_dtos import (
    SgaBoletoDetalheDTO,
    SgaBoletoDTO,
    SgaBoletoPageDTO,
)
from boleto_sync.core.utils.date_utils import format_br_date

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 3000
DEFAULT_TIMEOUT = 180.0
DEFAULT_DETAIL_TIMEOUT = 30.0


class SgaAPIClient(BaseAPIClient):
    """
    Cliente da API SGA de um único cliente (tenant).

    Cada instância carrega a credencial e a URL base do cliente;
    nada é lido de configuração global aqui dentro.
    """

    LIST_PATH = "listar/boleto-associado/periodo"
    DETAIL_PATH = "buscar/boleto/{nosso_numero}"

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        timeout: float = DEFAULT_TIMEOUT,
        detail_timeout: float = DEFAULT_DETAIL_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        super().__init__(
            base_url=base_url,
            default_headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
        )
        self.detail_timeout = detail_timeout
        self.page_size = page_size

    # ---------------------------------------------------------------- normalização --
    @staticmethod
    def normalize_page(raw: Any) -> SgaBoletoPageDTO:
        """
        O SGA responde com objeto puro ou com array de um elemento
        envolvendo o objeto. Array vazio / objeto sem `boletos` ⇒ página vazia.
        """
        if isinstance(raw, list):
            raw = raw[0] if raw else None
        if not isinstance(raw, dict) or not raw.get("boletos"):
            return SgaBoletoPageDTO()

        records = raw["boletos"]
        if isinstance(records, dict):
            records = [records]
        clean = [r for r in records if isinstance(r, dict)]
        dropped = len(records) - len(clean)
        if dropped:
            logger.warning("sga.page.dropped_non_object_records", dropped=dropped)

        boletos = [SgaBoletoDTO.from_raw(r) for r in clean]
        invalid = [b.nosso_numero for b in boletos if b.validation_error]
        if invalid:
            logger.warning("sga.page.invalid_records", invalid=len(invalid), nosso_numeros=invalid)

        return SgaBoletoPageDTO.model_validate({**raw, "boletos": boletos})

    # ---------------------------------------------------------------- boletos -------
    def fetch_page(
        self,
        *,
        situation_code: str,
        start_date: str | date,
        end_date: str | date,
        page: int,
    ) -> SgaBoletoPageDTO:
        body = {
            "codigo_situacao_boleto": str(situation_code),
            "data_vencimento_inicial": start_date if isinstance(start_date, str) else format_br_date(start_date),
            "data_vencimento_final": end_date if isinstance(end_date, str) else format_br_date(end_date),
            "inicio_paginacao": page,
            "quantidade_por_pagina": self.page_size,
        }
        raw = self._post(self.LIST_PATH, json=body)
        return self.normalize_page(raw)

    def fetch_boletos(
        self,
        *,
        situation_code: str,
        start_date: str | date,
        end_date: str | date,
    ) -> list[SgaBoletoDTO]:
        """
        Percorre todas as páginas do período. Para quando as páginas
        reportadas acabam ou quando uma página vem vazia.
        """
        log = logger.bind(situation_code=situation_code, start_date=str(start_date), end_date=str(end_date))
        boletos: list[SgaBoletoDTO] = []
        page = 0
        total_pages = 1

        while page < total_pages:
            result = self.fetch_page(
                situation_code=situation_code, start_date=start_date, end_date=end_date, page=page
            )
            if not result.boletos:
                log.debug("sga.fetch.empty_page", page=page)
                break

            boletos.extend(result.boletos)
            total_pages = result.numero_paginas or 1
            log.info(
                "sga.fetch.page",
                page=page,
                total_pages=total_pages,
                records=len(result.boletos),
                total_records=result.total_registros,
            )
            page += 1

        log.info("sga.fetch.done", pages=page, records=len(boletos))
        return boletos

    # ---------------------------------------------------------------- detalhe -------
    def get_boleto_detail(self, nosso_numero: str) -> list[SgaBoletoDetalheDTO]:
        raw = self._get(
            self.DETAIL_PATH.format(nosso_numero=quote(str(nosso_numero), safe="")),
            timeout=self.detail_timeout,
        )
        items = raw if isinstance(raw, list) else [raw]
        return [SgaBoletoDetalheDTO.model_validate(item) for item in items if isinstance(item, dict)]
