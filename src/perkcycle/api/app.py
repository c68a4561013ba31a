import uvicorn
from fastapi import FastAPI

from perkcycle.api.routes.expiry import router as expiry_router
from perkcycle.api.routes.health import router as health_router
from perkcycle.api.routes.timeline import router as timeline_router
from perkcycle.config import configure_logging, settings

app = FastAPI(title="PerkCycle API", version="0.1.0")
app.include_router(health_router)
app.include_router(expiry_router)
app.include_router(timeline_router)


def run() -> None:
    configure_logging()
    uvicorn.run("perkcycle.api.app:app", host=settings.app_host, port=settings.app_port, reload=False)
