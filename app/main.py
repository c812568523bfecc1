import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.api.routes import health, rankings, scoring, races, pilots
from app.core.config import settings
from app.core.logging import configure_logging
from app.services.gateway import GatewayError

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="F1 Prediction Contest API", version="0.1.0")

# Routers
app.include_router(health.router, tags=["system"])
app.include_router(rankings.router, prefix="/rankings", tags=["rankings"])
app.include_router(scoring.router, prefix="/scoring", tags=["scoring"])
app.include_router(races.router, prefix="/races", tags=["races"])
app.include_router(pilots.router, prefix="/pilots", tags=["pilots"])

@app.exception_handler(GatewayError)
async def gateway_error(request: Request, exc: GatewayError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})

@app.get("/", include_in_schema=False)
def root():
    return {"message": "F1 Prediction Contest API - see /docs"}
