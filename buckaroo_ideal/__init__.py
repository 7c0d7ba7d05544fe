"""Buckaroo iDEAL request signing and callback verification."""
from .config import Config, load_config
from .errors import (
    IdealError,
    ConfigurationError,
    OrderValidationError,
    InvalidSignatureError,
    ResponseError,
)
from .order import Order
from .signature import RequestSignature, compute
from .request import PaymentRequest
from .response import Response, ResponseSignature

__all__ = [
    "Config",
    "load_config",
    "IdealError",
    "ConfigurationError",
    "OrderValidationError",
    "InvalidSignatureError",
    "ResponseError",
    "Order",
    "RequestSignature",
    "compute",
    "PaymentRequest",
    "Response",
    "ResponseSignature",
]
