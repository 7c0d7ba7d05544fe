import logging
import math
import os
import re
import unicodedata
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict

from .errors import OrderValidationError

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9\-_.]")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def setup_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def load_env(path: str = ".env") -> Dict[str, str]:
    """Load simple KEY=VALUE .env file into a dict (non-robust)."""
    env: Dict[str, str] = {}
    if not os.path.exists(path):
        return env
    with open(path, "r") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def to_normalized_string(value: Any) -> str:
    """Reduce ``value`` to the characters the gateway accepts in identifiers.

    Accented letters are folded to their ASCII base (``"é"`` -> ``"e"``), then
    everything outside ``A-Z a-z 0-9 - _ .`` is dropped, spaces included.
    The gateway recomputes the signature from its own copy of the field, so
    the same rule is applied to the value that is posted.
    """
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    ascii_only = decomposed.encode("ascii", "ignore").decode("ascii")
    return _UNSAFE_CHARS.sub("", ascii_only)


def to_cents(amount: Any) -> int:
    """Convert an amount in major units to integer cents, rounding half up.

    Floats go through ``str`` first so ``19.99`` becomes ``1999`` and not
    ``1998``.
    """
    if amount is None:
        raise OrderValidationError("amount is required")
    if isinstance(amount, bool):
        raise OrderValidationError("amount must be numeric, got a boolean")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise OrderValidationError(f"amount must be finite, got {amount!r}")
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        raise OrderValidationError(f"amount is not numeric: {amount!r}")
    if not value.is_finite():
        raise OrderValidationError(f"amount must be finite, got {amount!r}")
    if value < 0:
        raise OrderValidationError(f"amount must not be negative, got {amount!r}")
    try:
        cents = (value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise OrderValidationError(f"amount is too large: {amount!r}")
    return int(cents)


def to_numeric_boolean(flag: Any) -> str:
    return "1" if flag else "0"


def from_numeric_boolean(value: Any) -> bool:
    """Parse ``1``/``0`` (and the usual textual spellings) into a bool."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower() if value is not None else ""
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"not a boolean flag: {value!r}")
