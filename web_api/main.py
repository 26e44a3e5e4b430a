import sys

from litestar import Litestar, get
from litestar.config.cors import CORSConfig
from litestar.datastructures import State
from litestar.status_codes import HTTP_200_OK
from loguru import logger

from rhythmkey.core.session import TapSession
from rhythmkey.presets import SessionConfig

# Configure logger
logger.remove()
logger.add(sys.stderr, level="DEBUG")

from .routers import EvaluationController, KeyController, TempoController

# CORS configuration
cors_config = CORSConfig(allow_origins=["*"])


@get("/health", status_code=HTTP_200_OK)
async def health_check() -> dict[str, str]:
    return {"status": "ok"}


def create_app(config: SessionConfig | None = None) -> Litestar:
    """Build an app instance owning its own tap session and results store."""
    return Litestar(
        route_handlers=[health_check, TempoController, KeyController, EvaluationController],
        cors_config=cors_config,
        state=State({"session": TapSession(config=config), "results": {}}),
        debug=True,
    )


app = create_app()
