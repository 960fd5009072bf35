from __future__ import annotations

import secrets

# 32 símbolos, sem 0/O e 1/I
SHORT_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
SHORT_CODE_LENGTH = 6
SLUG_BYTES = 20  # 160 bits


def generate_slug() -> str:
    return secrets.token_hex(SLUG_BYTES)


def generate_short_code() -> str:
    return "".join(secrets.choice(SHORT_CODE_ALPHABET) for _ in range(SHORT_CODE_LENGTH))


def normalize_short_code(value: str | None) -> str | None:
    """
    Normaliza o código digitado pelo usuário. Retorna None para
    entrada que nunca poderia ter sido emitida.
    """
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    if len(code) != SHORT_CODE_LENGTH or any(ch not in SHORT_CODE_ALPHABET for ch in code):
        return None
    return code


def build_full_url(base_url: str, slug: str) -> str:
    return f"{base_url.rstrip('/')}/app/?token={slug}"


def build_short_url(base_url: str, short_code: str | None) -> str | None:
    if not short_code:
        return None
    return f"{base_url.rstrip('/')}/app/s/{short_code}"
