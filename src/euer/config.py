"""Tax configuration resolution."""

import os
from decimal import Decimal, InvalidOperation
from typing import Optional

from euer.domain.entities import TaxConfig
from euer.domain.errors import ValidationError

DEFAULT_VAT_RATE = Decimal("19")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValidationError(f"Invalid boolean for {name}: '{value}'")


def _parse_rate(value: Decimal | int | float | str) -> Decimal:
    try:
        rate = Decimal(str(value).strip().replace(",", "."))
    except InvalidOperation:
        raise ValidationError(f"Invalid VAT rate: '{value}'") from None
    if not rate.is_finite() or rate < 0:
        raise ValidationError(f"Invalid VAT rate: '{value}'")
    return rate


def load_tax_config(
    small_business_rule: Optional[bool] = None,
    default_vat_rate: Optional[Decimal | int | float | str] = None,
) -> TaxConfig:
    """Resolve the tax configuration.

    Explicit arguments win, then the EUER_SMALL_BUSINESS_RULE and
    EUER_DEFAULT_VAT_RATE environment variables, then the defaults (no
    small-business rule, 19 % VAT).

    Raises:
        ValidationError: If a value cannot be parsed or the rate is negative
    """
    if small_business_rule is None:
        env_value = os.environ.get("EUER_SMALL_BUSINESS_RULE")
        small_business_rule = (
            _parse_bool("EUER_SMALL_BUSINESS_RULE", env_value) if env_value is not None else False
        )

    if default_vat_rate is None:
        default_vat_rate = os.environ.get("EUER_DEFAULT_VAT_RATE") or DEFAULT_VAT_RATE

    return TaxConfig(
        small_business_rule=bool(small_business_rule),
        default_vat_rate=_parse_rate(default_vat_rate),
    )
