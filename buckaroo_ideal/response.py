"""Parsing and verification of the gateway's return/push callback."""
import hmac
import logging
from dataclasses import dataclass
from typing import Mapping

from .config import Config
from .errors import InvalidSignatureError, ResponseError
from .signature import md5_hexdigest

logger = logging.getLogger("ideal.response")

SUCCESS_CODES = ('071', '121', '801')
PENDING_CODES = ('000', '001', '791', '792', '793')

REQUIRED_PARAMS = ('BPE_Trx', 'BPE_Timestamp', 'BPE_Invoice', 'BPE_Currency',
                   'BPE_Amount', 'BPE_Result', 'BPE_Mode', 'BPE_Signature2')


@dataclass(frozen=True)
class Response:
    transaction_key: str
    timestamp: str
    invoice_number: str
    reference: str
    currency: str
    amount_cents: str  # as sent, already in cents
    status_code: str
    mode: str
    signature: str
    config: Config

    @classmethod
    def from_params(cls, params: Mapping[str, str], config: Config) -> 'Response':
        missing = [name for name in REQUIRED_PARAMS if not params.get(name)]
        if missing:
            raise ResponseError(f"callback is missing parameters: {', '.join(missing)}")
        return cls(
            transaction_key=str(params['BPE_Trx']),
            timestamp=str(params['BPE_Timestamp']),
            invoice_number=str(params['BPE_Invoice']),
            reference=str(params.get('BPE_Reference') or ''),
            currency=str(params['BPE_Currency']),
            amount_cents=str(params['BPE_Amount']),
            status_code=str(params['BPE_Result']),
            mode=str(params['BPE_Mode']),
            signature=str(params['BPE_Signature2']),
            config=config,
        )

    @property
    def test_mode(self) -> bool:
        return self.mode == '1'

    @property
    def status(self) -> str:
        if self.status_code in SUCCESS_CODES:
            return 'success'
        if self.status_code in PENDING_CODES:
            return 'pending'
        return 'failed'

    @property
    def is_successful(self) -> bool:
        return self.status == 'success'

    @property
    def expected_signature(self) -> str:
        return str(ResponseSignature(self, self.config))

    def is_valid(self) -> bool:
        return hmac.compare_digest(self.expected_signature.encode("ascii"),
                                   self.signature.lower().encode("utf-8"))

    def verify(self) -> 'Response':
        if not self.is_valid():
            logger.error("Invalid signature on callback for invoice %s (trx %s)",
                         self.invoice_number, self.transaction_key)
            raise InvalidSignatureError(f"invalid signature for invoice {self.invoice_number}")
        return self


class ResponseSignature:
    """Signature the gateway puts on its callback.

    MD5 over transaction key, timestamp, merchant key, invoice number,
    reference, currency, amount in cents, result code, mode and secret key,
    joined without separators.
    """

    def __init__(self, response: Response, config: Config) -> None:
        self.response = response
        self.config = config

    @property
    def signature(self) -> str:
        self.config.require_credentials()
        r = self.response
        return md5_hexdigest([
            r.transaction_key,
            r.timestamp,
            self.config.merchant_key,
            r.invoice_number,
            r.reference,
            r.currency,
            r.amount_cents,
            r.status_code,
            r.mode,
            self.config.secret_key,
        ])

    def __str__(self) -> str:
        return self.signature


def parse_and_verify(params: Mapping[str, str], config: Config) -> Response:
    """Parse callback params and raise InvalidSignatureError if they were tampered with."""
    response = Response.from_params(params, config)
    return response.verify()
