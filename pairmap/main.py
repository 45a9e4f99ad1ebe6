from fastapi import FastAPI

from pairmap.api.cables import router as cables_router
from pairmap.api.circuits import router as circuits_router
from pairmap.api.project import router as project_router
from pairmap.api.splices import router as splices_router
from pairmap.errors import register_error_handlers
from pairmap.logging import configure_logging

configure_logging()

app = FastAPI(title="pairmap API")
register_error_handlers(app)

app.include_router(cables_router)
app.include_router(circuits_router)
app.include_router(splices_router)
app.include_router(project_router)


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}
