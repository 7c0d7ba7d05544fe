import dataclasses
from decimal import Decimal

import pytest

from buckaroo_ideal.config import Config, DEFAULT_GATEWAY_URL
from buckaroo_ideal.errors import ConfigurationError, OrderValidationError
from buckaroo_ideal.order import Order
from buckaroo_ideal.request import PaymentRequest


def test_params_for_known_order(order, config):
    params = PaymentRequest(order, config).params()
    assert params == {
        'BPE_Merchant': 'MERCHANT1',
        'BPE_Amount': '10000',
        'BPE_Currency': 'EUR',
        'BPE_Language': 'NL',
        'BPE_Mode': '1',
        'BPE_Invoice': 'EETNU-123',
        'BPE_Return_Method': 'POST',
        'BPE_Signature2': '2de040b9b19502508acda3e71d8d8a97',
    }
    assert 'SECRET1' not in params.values()


def test_optional_fields_and_return_urls():
    config = Config(merchant_key='MERCHANT1', secret_key='SECRET1', test_mode=False,
                    success_url='https://shop.example/ok', reject_url='https://shop.example/no',
                    error_url='https://shop.example/err', return_method='GET')
    order = Order(invoice_number='INV 42', amount=Decimal('12.50'), description='  Two\n tickets ',
                  reference='REF-1', language='EN')
    req = PaymentRequest(order, config)
    params = req.params()
    assert req.gateway_url == DEFAULT_GATEWAY_URL
    assert params['BPE_Invoice'] == 'INV42'
    assert params['BPE_Amount'] == '1250'
    assert params['BPE_Mode'] == '0'
    assert params['BPE_Description'] == 'Two tickets'
    assert params['BPE_Reference'] == 'REF-1'
    assert params['BPE_Language'] == 'EN'
    assert params['BPE_Return_Success'] == 'https://shop.example/ok'
    assert params['BPE_Return_Reject'] == 'https://shop.example/no'
    assert params['BPE_Return_Error'] == 'https://shop.example/err'
    assert params['BPE_Return_Method'] == 'GET'
    assert params['BPE_Signature2'] == str(req.signature)
    assert list(params)[-1] == 'BPE_Signature2'


def test_invalid_input_builds_nothing(order, config):
    with pytest.raises(ConfigurationError):
        PaymentRequest(order, dataclasses.replace(config, secret_key=None)).params()
    with pytest.raises(OrderValidationError):
        PaymentRequest(dataclasses.replace(order, amount='x'), config).params()
