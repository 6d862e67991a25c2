import pytest

from bip321 import load_test_config


@pytest.fixture(scope="module", autouse=True)
def setup_config():
    load_test_config()
