from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

from .catalog import PropertyType, is_known_category
from .money import parse_amount, quantize


# Shown when a required field is missing or blank.
REQUIRED_MESSAGES: dict[str, str] = {
    "clientName": "Kundnamn krävs",
    "amount": "Belopp krävs",
    "propertyType": "Typ av bostad krävs",
    "category": "Kategori krävs",
    "subCategory": "Underkategori krävs",
    "generalInfo": "Allmän information krävs",
    "validityPeriod": "Giltighetstid krävs",
    "clientEmail": "Ogiltig e-postadress",
    "clientPhone": "Telefonnummer krävs",
    "workAddress": "Arbetsadress krävs",
}

_REQUIRED_TYPES = {"missing", "string_too_short", "string_type"}


class ProposalInput(BaseModel):
    """Fields a contractor submits when creating a proposal."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    clientName: str = Field(min_length=1)
    amount: Decimal
    propertyType: PropertyType
    category: str = Field(min_length=1)
    subCategory: str = Field(min_length=1)
    includeMaterials: bool = False
    includeVAT: bool = False
    generalInfo: str = Field(min_length=1)
    startDate: date | None = None
    validityPeriod: str = Field(min_length=1)
    clientEmail: EmailStr
    clientPhone: str = Field(min_length=1)
    workAddress: str = Field(min_length=1)

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, v: Any) -> Decimal:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise PydanticCustomError("missing", REQUIRED_MESSAGES["amount"])
        d = parse_amount(v)
        if d is None:
            raise PydanticCustomError("amount_invalid", "Ogiltigt belopp")
        if d < 0:
            raise PydanticCustomError("amount_negative", "Belopp kan inte vara negativt")
        # Stored in whole öre so views and dashboard sums agree.
        return quantize(d)

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: str) -> str:
        if not is_known_category(v):
            raise PydanticCustomError("category_unknown", "Okänd kategori")
        return v

    @field_validator("startDate", mode="before")
    @classmethod
    def _blank_start_date(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("startDate")
    @classmethod
    def _start_not_in_past(cls, v: date | None, info: ValidationInfo) -> date | None:
        if v is None:
            return v
        today = (info.context or {}).get("today") or date.today()
        if v < today:
            raise PydanticCustomError("start_date_past", "Startdatum kan inte ligga bakåt i tiden")
        return v


def _field_error(err: dict[str, Any]) -> dict[str, Any]:
    loc = [str(x) for x in (err.get("loc") or [])]
    name = loc[0] if loc else ""
    kind = str(err.get("type") or "")
    blank = isinstance(err.get("input"), str) and not str(err.get("input")).strip()

    if (kind in _REQUIRED_TYPES or blank) and name in REQUIRED_MESSAGES:
        message = REQUIRED_MESSAGES[name]
    elif name == "clientEmail":
        message = REQUIRED_MESSAGES["clientEmail"]
    elif name == "propertyType":
        message = "Ogiltig typ av bostad"
    else:
        message = str(err.get("msg") or "Ogiltigt värde")

    return {"field": name, "message": message, "type": kind}


def validate_for_creation(
    payload: Any, *, today: date | None = None
) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """
    Validate and normalize a creation payload, returning (normalized, errors).

    `today` is the reference date for the start-date rule (day granularity).
    Errors carry one entry per failing field check in a frontend-friendly shape.
    """
    if not isinstance(payload, dict):
        return ({}, [{"field": "", "message": "Ogiltig förfrågan", "type": "dict_type"}])

    try:
        m = ProposalInput.model_validate(payload, context={"today": today or date.today()})
    except ValidationError as e:
        return ({}, [_field_error(it) for it in e.errors(include_url=False)])
    return (m.model_dump(), [])
