import os
import pytest
from subocr.config import get_settings

def pytest_configure():
    os.environ.setdefault("SUBOCR_LOG_LEVEL", "WARNING")

@pytest.fixture(autouse=True)
def _reset_settings_cache():
    # evita fuga de estado entre tests
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
