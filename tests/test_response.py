import hashlib

import pytest

from buckaroo_ideal.errors import ConfigurationError, InvalidSignatureError, ResponseError
from buckaroo_ideal.config import Config
from buckaroo_ideal.response import Response, ResponseSignature, parse_and_verify


def sign_callback(params: dict, merchant_key: str = 'MERCHANT1', secret: str = 'SECRET1') -> dict:
    salt = ''.join([
        params['BPE_Trx'], params['BPE_Timestamp'], merchant_key, params['BPE_Invoice'],
        params.get('BPE_Reference', ''), params['BPE_Currency'], params['BPE_Amount'],
        params['BPE_Result'], params['BPE_Mode'], secret,
    ])
    signed = dict(params)
    signed['BPE_Signature2'] = hashlib.md5(salt.encode('utf-8')).hexdigest()
    return signed


def callback(**overrides) -> dict:
    params = {
        'BPE_Trx': 'TRX0001',
        'BPE_Timestamp': '2026-10-18 12:00:00',
        'BPE_Invoice': 'EETNU-123',
        'BPE_Reference': 'REF-1',
        'BPE_Currency': 'EUR',
        'BPE_Amount': '10000',
        'BPE_Result': '121',
        'BPE_Mode': '1',
    }
    params.update(overrides)
    return sign_callback(params)


def test_valid_callback(config):
    response = parse_and_verify(callback(), config)
    assert response.is_valid()
    assert response.is_successful
    assert response.status == 'success'
    assert response.test_mode is True
    assert response.amount_cents == '10000'
    assert str(ResponseSignature(response, config)) == response.signature


@pytest.mark.parametrize('code, status', [
    ('071', 'success'), ('801', 'success'), ('791', 'pending'), ('000', 'pending'), ('490', 'failed'),
])
def test_status_mapping(config, code, status):
    assert parse_and_verify(callback(BPE_Result=code), config).status == status


def test_tampered_amount_is_rejected(config):
    params = callback()
    params['BPE_Amount'] = '1'
    response = Response.from_params(params, config)
    assert not response.is_valid()
    with pytest.raises(InvalidSignatureError):
        response.verify()


def test_uppercase_signature_accepted(config):
    params = callback()
    params['BPE_Signature2'] = params['BPE_Signature2'].upper()
    assert parse_and_verify(params, config).is_valid()


def test_wrong_secret_is_rejected(config):
    other = Config(merchant_key='MERCHANT1', secret_key='OTHER', test_mode=True)
    with pytest.raises(InvalidSignatureError):
        parse_and_verify(callback(), other)


def test_missing_params(config):
    params = callback()
    del params['BPE_Trx']
    with pytest.raises(ResponseError) as exc:
        Response.from_params(params, config)
    assert 'BPE_Trx' in str(exc.value)


def test_reference_is_optional(config):
    params = callback()
    del params['BPE_Reference']
    params = sign_callback(params)
    assert parse_and_verify(params, config).reference == ''


def test_missing_credentials(config):
    with pytest.raises(ConfigurationError):
        parse_and_verify(callback(), Config(merchant_key='MERCHANT1'))


def test_non_ascii_signature_is_invalid(config):
    params = callback()
    params['BPE_Signature2'] = 'é' * 32
    response = Response.from_params(params, config)
    assert response.is_valid() is False
    with pytest.raises(InvalidSignatureError):
        response.verify()
