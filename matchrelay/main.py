from fastapi import FastAPI
import logging

from matchrelay import __version__
from matchrelay.api.deps import init_lobby
from matchrelay.api.models import InfoResponse
from matchrelay.api.routes import router
from matchrelay.config import load_settings

settings = load_settings()

app = FastAPI(title="matchrelay", version=__version__)
app.include_router(router)
# Configure logging
logging.basicConfig(level=settings.log_level, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    init_lobby(app)
    logger.info("matchrelay ready (port %s)", settings.port)


@app.get("/info", response_model=InfoResponse)
async def info() -> InfoResponse:
    return InfoResponse(name="matchrelay", version=__version__)
