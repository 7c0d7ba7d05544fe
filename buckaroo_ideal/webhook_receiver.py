"""Webhook receiver for Buckaroo iDEAL push/return callbacks.

Provides a small FastAPI app with a POST /payment-update endpoint. The gateway
posts form-encoded ``BPE_*`` fields; JSON bodies with the same keys are accepted
too. The callback signature is verified before anything is dispatched. Run it
via `uvicorn buckaroo_ideal.webhook_receiver:app` behind a TLS-enabled reverse
proxy.
"""

from fastapi import FastAPI, Request, HTTPException
from fastapi.concurrency import run_in_threadpool
from typing import Callable, List, Optional
import logging
import os

from .config import Config, load_config
from .errors import InvalidSignatureError, ResponseError
from .response import Response, parse_and_verify

logger = logging.getLogger("ideal.webhook")

app = FastAPI()

# Registered handlers will be called with the verified Response
_registered_handlers: List[Callable[[Response], None]] = []
_config: Optional[Config] = None


def register_handler(fn: Callable[[Response], None]):
    """Register a callback to be called on every verified payment update."""
    _registered_handlers.append(fn)


def configure(config: Config):
    """Use ``config`` for signature checks instead of loading it from the environment."""
    global _config
    _config = config


def get_config() -> Config:
    global _config
    if _config is None:
        _config = load_config()
    return _config


async def _read_params(request: Request) -> dict:
    content_type = request.headers.get('content-type', '')
    if content_type.startswith('application/json'):
        payload = await request.json()
        if not isinstance(payload, dict):
            raise ValueError("JSON body must be an object")
        return {str(k): str(v) for k, v in payload.items() if v is not None}
    form = await request.form()
    return {k: str(v) for k, v in form.items()}


@app.post('/payment-update')
async def payment_update(request: Request):
    client = request.client.host if request.client else 'unknown'
    try:
        params = await _read_params(request)
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid request body")

    # keyring and Vault lookups block, keep them off the event loop
    config = await run_in_threadpool(get_config)

    try:
        response = parse_and_verify(params, config)
    except ResponseError as e:
        logger.warning("Rejected callback from %s: %s", client, e)
        raise HTTPException(status_code=400, detail=str(e))
    except InvalidSignatureError:
        logger.error("Invalid callback signature from %s on /payment-update", client)
        raise HTTPException(status_code=401, detail="Invalid signature")

    logger.info("Payment update for invoice %s: %s (%s)",
                response.invoice_number, response.status, response.status_code)
    # dispatch to registered handlers
    for h in _registered_handlers:
        try:
            h(response)
        except Exception:
            logger.exception("handler failed")

    return {"status": "ok", "payment_status": response.status}


if __name__ == '__main__':
    # Quick local runner for manual testing
    import uvicorn
    from .utils import setup_logging
    setup_logging(os.getenv('LOG_LEVEL', 'INFO'))
    host = os.getenv('WEBHOOK_HOST', '127.0.0.1')
    port = int(os.getenv('WEBHOOK_PORT', '8000'))
    uvicorn.run(app, host=host, port=port)
