"""Exceptions raised while signing requests or verifying gateway callbacks."""


class IdealError(Exception):
    pass


class ConfigurationError(IdealError, ValueError):
    """Merchant configuration is missing or unusable."""


class OrderValidationError(IdealError, ValueError):
    """An order field cannot be put into the signed material."""


class InvalidSignatureError(IdealError):
    """The signature sent by the gateway does not match the expected one."""


class ResponseError(IdealError, ValueError):
    """A gateway callback is missing required parameters."""
