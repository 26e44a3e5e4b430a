import pytest
from litestar.testing import TestClient

from rhythmkey.core.session import TapSession
from rhythmkey.presets import clear_user_presets
from web_api.main import create_app


@pytest.fixture
def test_client() -> TestClient:
    return TestClient(app=create_app())


@pytest.fixture
def manual_clock():
    """A settable clock for sessions; advance with ``clock.now = ...``."""

    class Clock:
        now = 0.0

        def __call__(self) -> float:
            return self.now

    return Clock()


@pytest.fixture
def session(manual_clock) -> TapSession:
    return TapSession(clock=manual_clock)


@pytest.fixture(autouse=True)
def _reset_user_presets():
    yield
    clear_user_presets()
