"""Merchant configuration for the Buckaroo iDEAL gateway.

Credentials are looked up in the OS keyring first, then the environment, and
finally HashiCorp Vault when ``VAULT_ADDR``/``VAULT_TOKEN``/``VAULT_PATH`` are
set. The resulting :class:`Config` is immutable and is passed explicitly to
whatever needs it.
"""
import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict

from .errors import ConfigurationError
from .utils import load_env, from_numeric_boolean

logger = logging.getLogger('ideal.config')

KEYRING_SERVICE = 'buckaroo-ideal'
DEFAULT_GATEWAY_URL = 'https://payment.buckaroo.nl/gateway/ideal_payment.asp'
RETURN_METHODS = ('POST', 'GET')
CREDENTIAL_KEYS = ('IDEAL_MERCHANT_KEY', 'IDEAL_SECRET_KEY')


@dataclass(frozen=True)
class Config:
    merchant_key: Optional[str] = None
    secret_key: Optional[str] = field(default=None, repr=False)
    test_mode: bool = False
    gateway_url: str = DEFAULT_GATEWAY_URL
    success_url: Optional[str] = None
    reject_url: Optional[str] = None
    error_url: Optional[str] = None
    return_method: str = 'POST'

    def __post_init__(self):
        if not isinstance(self.test_mode, bool):
            raise ConfigurationError(f"test_mode must be a bool, got {self.test_mode!r}")
        if self.return_method not in RETURN_METHODS:
            raise ConfigurationError(f"return_method must be one of {RETURN_METHODS}, got {self.return_method!r}")

    def require_credentials(self) -> None:
        """Raise ConfigurationError unless both merchant and secret key are set."""
        missing = [name for name in ('merchant_key', 'secret_key') if not _present(getattr(self, name))]
        if missing:
            raise ConfigurationError(f"missing merchant configuration: {', '.join(missing)}")


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


def read_credentials() -> Dict[str, Optional[str]]:
    result: Dict[str, Optional[str]] = {}
    # Try keyring first
    for key in CREDENTIAL_KEYS:
        result[key] = get_secret_keyring(key)

    # fallback to environment
    for key in CREDENTIAL_KEYS:
        result[key] = result.get(key) or os.getenv(key)

    # optional: check HashiCorp Vault if configured
    vault_addr = os.getenv('VAULT_ADDR')
    vault_token = os.getenv('VAULT_TOKEN')
    vault_path = os.getenv('VAULT_PATH')
    if vault_addr and vault_token and vault_path and not all(result.values()):
        vault_data = get_secret_vault(vault_addr, vault_token, vault_path)
        if isinstance(vault_data, dict):
            for key in CREDENTIAL_KEYS:
                result[key] = result.get(key) or vault_data.get(key)

    return result


def get_secret_keyring(key: str) -> Optional[str]:
    try:
        import keyring
        return keyring.get_password(KEYRING_SERVICE, key)
    except Exception:
        # no usable keyring backend on this machine
        logger.debug('keyring lookup for %s failed', key, exc_info=True)
        return None


def get_secret_vault(vault_addr: str, token: str, path: str) -> Optional[dict]:
    """Read the credentials secret from HashiCorp Vault (KV v2). Returns dict or None."""
    try:
        import hvac
        client = hvac.Client(url=vault_addr, token=token)
        secret = client.secrets.kv.v2.read_secret_version(path=path)
        return secret.get('data', {}).get('data')
    except Exception:
        logger.exception('Failed to read secret from vault')
        return None


def load_config(env_path: str = '.env') -> Config:
    """Build a Config from IDEAL_* settings.

    Process environment wins over the .env file. Missing credentials are not an
    error here; they are reported when a signature is computed.
    """
    file_env = load_env(env_path)

    def setting(name: str, default: Optional[str] = None) -> Optional[str]:
        value = os.getenv(name)
        if value is None:
            value = file_env.get(name, default)
        return value

    creds = read_credentials()
    merchant_key = creds.get('IDEAL_MERCHANT_KEY') or file_env.get('IDEAL_MERCHANT_KEY')
    secret_key = creds.get('IDEAL_SECRET_KEY') or file_env.get('IDEAL_SECRET_KEY')

    raw_mode = setting('IDEAL_TEST_MODE', '0')
    try:
        test_mode = from_numeric_boolean(raw_mode)
    except ValueError:
        raise ConfigurationError(f"IDEAL_TEST_MODE must be a boolean flag, got {raw_mode!r}")

    config = Config(
        merchant_key=merchant_key,
        secret_key=secret_key,
        test_mode=test_mode,
        gateway_url=setting('IDEAL_GATEWAY_URL', DEFAULT_GATEWAY_URL),
        success_url=setting('IDEAL_SUCCESS_URL'),
        reject_url=setting('IDEAL_REJECT_URL'),
        error_url=setting('IDEAL_ERROR_URL'),
        return_method=(setting('IDEAL_RETURN_METHOD', 'POST') or 'POST').upper(),
    )
    logger.info("Loaded iDEAL config merchant=%s test_mode=%s", config.merchant_key, config.test_mode)
    return config
