from __future__ import annotations

import math
from typing import Optional

from ..core.errors import InvalidInputError
from ..models import BASE_CURRENCY, SECONDARY_CURRENCY, Currency


def validate_exchange_rate(currency: Currency, exchange_rate: Optional[float]) -> None:
    """A rate is required for the secondary currency and forbidden for the base one."""
    if currency == SECONDARY_CURRENCY:
        if exchange_rate is None:
            raise InvalidInputError(f"Exchange rate is required for {currency.value}")
        if not math.isfinite(exchange_rate) or exchange_rate <= 0:
            raise InvalidInputError("Exchange rate must be a positive number")
    elif exchange_rate is not None:
        raise InvalidInputError(f"Exchange rate is not used for {BASE_CURRENCY.value}")


def normalize(amount: float, currency: Currency, exchange_rate: Optional[float] = None) -> float:
    """Convert ``amount`` into the base currency. No rounding is applied."""
    if currency == BASE_CURRENCY:
        return amount
    validate_exchange_rate(currency, exchange_rate)
    return amount * exchange_rate
