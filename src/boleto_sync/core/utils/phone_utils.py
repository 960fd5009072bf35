from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def format_br_phone(value: str | None, empty: str = "—") -> str:
    """
    Formata telefone brasileiro para exibição:
      10 dígitos → (DD) XXXX-XXXX
      11 dígitos → (DD) XXXXX-XXXX
    Qualquer outro formato é devolvido como veio (sem espaços nas bordas).
    """
    if not value:
        return empty
    raw = str(value).strip()
    digits = _NON_DIGITS.sub("", raw)
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    return raw or empty
