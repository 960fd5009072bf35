from __future__ import annotations

import calendar
import re
from datetime import date, datetime

from boleto_sync.core.domain.exceptions import InvalidDateError, InvalidPeriodError

BR_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
PERIOD_RE = re.compile(r"^(0[1-9]|1[0-2])/\d{4}$")
EMPTY_DATE_SENTINELS = {"", "0000-00-00", "00/00/0000"}


def parse_br_date(value: str) -> date:
    """
    Converte 'DD/MM/YYYY' em date, rejeitando datas inexistentes
    (ex.: 31/02/2026).
    """
    if not isinstance(value, str) or not BR_DATE_RE.match(value.strip()):
        raise InvalidDateError(f"Data inválida '{value}'. Use o formato DD/MM/YYYY.")
    try:
        return datetime.strptime(value.strip(), "%d/%m/%Y").date()
    except ValueError as exc:
        raise InvalidDateError(f"Data inexistente '{value}'.") from exc


def format_br_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def normalize_due_date(value: str | None) -> date | None:
    """
    Aceita 'YYYY-MM-DD' ou 'DD/MM/YYYY'. Vazio, sentinela ou
    formato desconhecido ⇒ None.
    """
    if value is None:
        return None
    raw = str(value).strip()
    if raw in EMPTY_DATE_SENTINELS:
        return None
    # SGA às vezes devolve datetime completo ("2026-02-10 00:00:00")
    raw = raw.split(" ")[0].split("T")[0]
    try:
        if ISO_DATE_RE.match(raw):
            return date.fromisoformat(raw)
        if BR_DATE_RE.match(raw):
            return datetime.strptime(raw, "%d/%m/%Y").date()
    except ValueError:
        return None
    return None


def period_from_date(value: str | date) -> str:
    """'01/02/2026' → '02/2026'."""
    d = value if isinstance(value, date) else parse_br_date(value)
    return f"{d.month:02d}/{d.year}"


def validate_period(value: str) -> str:
    if not isinstance(value, str) or not PERIOD_RE.match(value.strip()):
        raise InvalidPeriodError(f"Competência inválida '{value}'. Use o formato MM/YYYY.")
    return value.strip()


def period_bounds(period: str) -> tuple[date, date]:
    """Primeiro e último dia da competência 'MM/YYYY'."""
    month, year = (int(p) for p in validate_period(period).split("/"))
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def current_month_range(today: date | None = None) -> tuple[str, str]:
    """Intervalo do mês corrente em DD/MM/YYYY."""
    today = today or date.today()
    first, last = period_bounds(f"{today.month:02d}/{today.year}")
    return format_br_date(first), format_br_date(last)
