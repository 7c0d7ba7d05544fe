import os
import sys
# Ensure workspace root is on path so 'buckaroo_ideal' imports work without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from buckaroo_ideal.config import Config
from buckaroo_ideal.order import Order


@pytest.fixture
def config():
    return Config(merchant_key='MERCHANT1', secret_key='SECRET1', test_mode=True)


@pytest.fixture
def order():
    return Order(invoice_number='EETNU-123', amount=100, currency='EUR')
