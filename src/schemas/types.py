"""Shared field types."""

from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Amounts and percentages are Decimal internally and JSON numbers on the wire
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
