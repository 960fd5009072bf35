from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# ───────────────────────────────────────────────
# DTOs para integração com a API SGA
#
# O SGA devolve campos opcionais, números como string (e vice-versa)
# e listas nulas. Tudo é normalizado aqui, na fronteira do cliente.
# ───────────────────────────────────────────────


class _SgaModel(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True, populate_by_name=True)


class SgaVeiculoDTO(_SgaModel):
    situacao_veiculo: str | None = None
    codigo_voluntario: str | None = None
    modelo: str | None = None
    placa: str | None = None

    @field_validator("situacao_veiculo", "codigo_voluntario", mode="after")
    @classmethod
    def _strip(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v


class SgaBoletoDTO(_SgaModel):
    nosso_numero: str | None = None
    linha_digitavel: str | None = None
    valor_boleto: str | None = None
    nome_associado: str | None = None
    cpf: str | None = None
    celular: str | None = None
    data_vencimento: str | None = None
    situacao_boleto: str | None = None
    mes_referente: str | None = None
    veiculos: list[SgaVeiculoDTO] = Field(default_factory=list)
    # preenchido apenas por `from_raw` quando o registro bruto não valida
    validation_error: str | None = Field(default=None, exclude=True)

    @field_validator("veiculos", mode="before")
    @classmethod
    def _veiculos_list(cls, v: Any) -> list[Any]:
        if isinstance(v, dict):
            return [v]
        if not isinstance(v, list):
            return []
        return [item for item in v if isinstance(item, dict)]

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> SgaBoletoDTO:
        """
        Valida um registro isolado. Registro inválido não derruba a página:
        volta marcado com `validation_error` para o orquestrador reportar.
        """
        payload = {k: v for k, v in raw.items() if k != "validation_error"}
        try:
            return cls.model_validate(payload)
        except (ValidationError, TypeError) as exc:
            fields = (
                sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
                if isinstance(exc, ValidationError)
                else []
            )
            detail = f"campos inválidos: {', '.join(fields)}" if fields else str(exc)
            nosso_numero = raw.get("nosso_numero")
            return cls.model_construct(
                nosso_numero=str(nosso_numero) if nosso_numero not in (None, "") else None,
                veiculos=[],
                validation_error=f"Registro inválido no SGA ({detail})",
            )


class SgaBoletoPageDTO(BaseModel):
    """Página normalizada de `listar/boleto-associado/periodo`."""
    boletos: list[SgaBoletoDTO] = Field(default_factory=list)
    total_registros: int | None = None
    pagina_corrente: int | None = None
    numero_paginas: int | None = None

    @field_validator("boletos", mode="before")
    @classmethod
    def _boletos_list(cls, v: Any) -> list[Any]:
        return v or []


class SgaPixDTO(_SgaModel):
    copia_cola: str | None = None


class SgaBoletoDetalheDTO(_SgaModel):
    """Item de `buscar/boleto/{nosso_numero}`."""
    nosso_numero: str | None = None
    link_boleto: str | None = None
    short_link: str | None = None
    pix: SgaPixDTO | None = None

    @field_validator("pix", mode="before")
    @classmethod
    def _pix_obj(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @property
    def pix_copy_paste(self) -> str | None:
        return self.pix.copia_cola if self.pix else None

    @property
    def pdf_url(self) -> str | None:
        return self.link_boleto or self.short_link or None
