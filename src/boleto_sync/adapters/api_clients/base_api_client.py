from __future__ import annotations

from typing import Any
from urllib.parse import urljoin

import requests
import structlog

from boleto_sync.core.domain.exceptions import (
    UpstreamAuthenticationError,
    UpstreamAuthorizationError,
    UpstreamConnectionError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamRequestError,
    UpstreamServerError,
)


class BaseAPIClient:
    """
    Utilitário HTTP (GET/POST) com:
      • timeout configurável por requisição
      • classificação de falhas em exceções tipadas
      • sem retry automático (a política de retentativa fica com a task Celery)
    """

    def __init__(
        self,
        *,
        base_url: str,
        default_headers: dict[str, str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.log = structlog.get_logger(__name__).bind(component=type(self).__name__)
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

        self.session = requests.Session()
        if default_headers:
            self.session.headers.update(default_headers)

    # ---------------------------------------------------------------------- utils -----
    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    @staticmethod
    def _upstream_message(resp: requests.Response) -> str | None:
        try:
            body = resp.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            return body.get("message") or body.get("mensagem") or body.get("error")
        return None

    def _raise_for_status(self, resp: requests.Response) -> None:
        status = resp.status_code
        if status < 400:
            return
        detail = self._upstream_message(resp)
        if status == 401:
            raise UpstreamAuthenticationError("Token SGA inválido ou expirado.", status)
        if status == 403:
            raise UpstreamAuthorizationError("Acesso negado pelo SGA.", status)
        if status == 404:
            raise UpstreamNotFoundError("Endpoint SGA não encontrado. Verifique a URL base do cliente.", status)
        if status >= 500:
            raise UpstreamServerError(f"Erro interno no SGA (HTTP {status}).", status)
        raise UpstreamRequestError(detail or f"Requisição rejeitada pelo SGA (HTTP {status}).", status)

    # ---------------------------------------------------------------------- HTTP ------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        timeout: float | None = None,
    ) -> Any:
        """Executa a requisição e devolve o JSON bruto (ou levanta UpstreamError)."""
        url = self._url(path)
        log = self.log.bind(method=method, url=url)
        log.debug("http.request", params=params)

        try:
            resp = self.session.request(
                method, url, params=params, json=json, timeout=timeout or self.timeout
            )
        except requests.Timeout as exc:
            log.error("http.timeout", error=str(exc))
            raise UpstreamConnectionError(f"Timeout ao acessar o SGA: {exc}") from exc
        except requests.RequestException as exc:
            log.error("http.connection_error", error=str(exc))
            raise UpstreamConnectionError(f"Sem resposta do SGA: {exc}") from exc

        log.debug("http.response", status_code=resp.status_code)
        try:
            self._raise_for_status(resp)
        except UpstreamError as exc:
            log.warning("http.upstream_error", status_code=resp.status_code, error=str(exc))
            raise

        try:
            return resp.json()
        except ValueError as exc:
            log.error("http.invalid_json", status_code=resp.status_code)
            raise UpstreamServerError("Resposta do SGA não é um JSON válido.", resp.status_code) from exc

    def _get(self, path: str, *, params: dict[str, Any] | None = None, timeout: float | None = None) -> Any:
        return self._request("GET", path, params=params, timeout=timeout)

    def _post(self, path: str, *, json: Any, timeout: float | None = None) -> Any:
        return self._request("POST", path, json=json, timeout=timeout)
