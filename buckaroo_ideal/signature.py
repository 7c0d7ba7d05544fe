"""Request signature for Buckaroo iDEAL payments.

The gateway recomputes the signature from the posted fields and rejects the
payment when it differs, so the material below must match its rule exactly:

    merchant_key + invoice_number + amount_in_cents + currency + mode + secret_key

joined without separators and hashed with MD5 (lowercase hex). ``mode`` is
``"1"`` in test mode and ``"0"`` otherwise.

    order = Order(invoice_number='EETNU-123', amount=100)
    signature = str(RequestSignature(order, config))
"""
import hashlib
import logging
import re
from typing import List

from .config import Config
from .errors import OrderValidationError
from .order import Order
from .utils import to_cents, to_normalized_string, to_numeric_boolean

logger = logging.getLogger("ideal.signature")

_CURRENCY = re.compile(r"[A-Z]{3}")


def md5_hexdigest(parts: List[str]) -> str:
    return hashlib.md5("".join(parts).encode("utf-8")).hexdigest()


def normalized_invoice_number(order: Order) -> str:
    invoice_number = to_normalized_string(order.invoice_number)
    if not invoice_number:
        raise OrderValidationError(f"invoice_number is empty after normalization: {order.invoice_number!r}")
    return invoice_number


def validated_currency(order: Order) -> str:
    # a fixed three-letter code keeps the amount/currency boundary unambiguous
    currency = order.currency
    if not isinstance(currency, str) or not _CURRENCY.fullmatch(currency):
        raise OrderValidationError(f"currency must be an ISO 4217 code like 'EUR', got {currency!r}")
    return currency


class RequestSignature:
    """Signature for one order under one merchant configuration."""

    def __init__(self, order: Order, config: Config) -> None:
        self.order = order
        self.config = config

    @property
    def merchant_key(self):
        return self.config.merchant_key

    @property
    def secret_key(self):
        return self.config.secret_key

    @property
    def test_mode(self) -> bool:
        return self.config.test_mode

    def salt(self) -> List[str]:
        """Return the hashed fields in gateway order. Contains the secret key."""
        self.config.require_credentials()
        return [
            self.merchant_key,
            normalized_invoice_number(self.order),
            str(to_cents(self.order.amount)),
            validated_currency(self.order),
            to_numeric_boolean(self.test_mode),
            self.secret_key,
        ]

    @property
    def signature(self) -> str:
        digest = md5_hexdigest(self.salt())
        logger.debug("Signed invoice %s", self.order.invoice_number)
        return digest

    def __str__(self) -> str:
        return self.signature

    def __repr__(self) -> str:
        return f"RequestSignature(invoice_number={self.order.invoice_number!r})"


def compute(order: Order, config: Config) -> str:
    return RequestSignature(order, config).signature
