from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union


@dataclass
class Order:
    invoice_number: Optional[str]
    amount: Union[Decimal, int, float, str, None]  # major units, e.g. Decimal('12.50')
    currency: Optional[str] = "EUR"
    description: Optional[str] = None
    reference: Optional[str] = None
    language: str = "NL"
