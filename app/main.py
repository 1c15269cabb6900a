from fastapi import FastAPI
from loguru import logger

from app.api.workload import router as workload_router
from app.config.settings import settings
from app.core.logger import configure_from_settings

configure_from_settings(settings)

app = FastAPI(title="Workload Risk Engine")
app.include_router(workload_router)

logger.info("Workload API ready")


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}
