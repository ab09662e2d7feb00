# 📄 File: farmx/shared/utils/formatters.py

# 🧭 Purpose (Layman Explanation):
# Keeps the look of API answers consistent: field names in camelCase, money as
# plain numbers rounded to cents, and dates in one standard text format.

# 🧪 Purpose (Technical Summary):
# Presentation helpers shared by every module's API schemas: a camelCase pydantic
# base model, a Decimal money type serialized as a JSON number, and day-key formatting.

# 🔗 Dependencies:
# - pydantic: alias generation and annotated serializers
# - decimal: money rounding
# - datetime: ISO date keys

# 🔄 Connected Modules / Calls From:
# Used by: storefront, subscriptions and analytics API schemas; analytics aggregator

from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Union

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENTS = Decimal("0.01")


def format_money(value: Union[Decimal, int, float, str]) -> float:
    """Round to cents (half-up) and return a JSON-friendly number."""
    return float(Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP))


Money = Annotated[Decimal, PlainSerializer(format_money, return_type=float, when_used="json")]


def format_day(value: Union[datetime, date]) -> str:
    """
    ISO calendar day of a timestamp, in UTC.

    Naive datetimes are taken to already be UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        value = value.astimezone(timezone.utc).date()
    return value.isoformat()


class CamelModel(BaseModel):
    """Response/request base: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
