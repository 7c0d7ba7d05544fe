"""Form parameters for the iDEAL payment redirect.

Builds the ``BPE_*`` fields the gateway expects, including ``BPE_Signature2``.
Posting them (an HTML form or a redirect) is left to the caller.
"""
import logging
from typing import Dict, Optional

from .config import Config
from .order import Order
from .signature import RequestSignature, normalized_invoice_number, validated_currency
from .utils import to_cents, to_numeric_boolean

logger = logging.getLogger("ideal.request")


class PaymentRequest:
    def __init__(self, order: Order, config: Config) -> None:
        self.order = order
        self.config = config
        self.signature = RequestSignature(order, config)

    @property
    def gateway_url(self) -> str:
        return self.config.gateway_url

    def params(self) -> Dict[str, str]:
        """Return the ordered form fields; unset optional fields are left out.

        Raises ConfigurationError / OrderValidationError before anything is built
        when the order cannot be signed.
        """
        signature = self.signature.signature
        order = self.order
        fields: Dict[str, Optional[str]] = {
            'BPE_Merchant': self.config.merchant_key,
            'BPE_Amount': str(to_cents(order.amount)),
            'BPE_Currency': validated_currency(order),
            'BPE_Language': order.language,
            'BPE_Mode': to_numeric_boolean(self.config.test_mode),
            'BPE_Description': _compact(order.description),
            'BPE_Reference': order.reference,
            # the gateway hashes what it receives, so post the normalized form
            'BPE_Invoice': normalized_invoice_number(order),
            'BPE_Return_Success': self.config.success_url,
            'BPE_Return_Reject': self.config.reject_url,
            'BPE_Return_Error': self.config.error_url,
            'BPE_Return_Method': self.config.return_method,
            'BPE_Signature2': signature,
        }
        params = {k: v for k, v in fields.items() if v}
        logger.info("Built payment request for invoice %s (%s cents %s)",
                    params['BPE_Invoice'], params['BPE_Amount'], params['BPE_Currency'])
        return params


def _compact(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    return " ".join(text.split())
