import pytest

from sizewise.config import settings
from sizewise.routers import analyze as analyze_router


@pytest.fixture(autouse=True)
def _isolated_state():
    # TestClient traffic all comes from one host; keep the bucket out of the way
    settings.rate_limit_per_min = 0
    analyze_router.store.clear()
    yield
    analyze_router.store.clear()
