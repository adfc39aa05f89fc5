from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from core.config import settings
from core.logger import logger
from services.api import router as api_router
from services.poller import poller
from services.scheduler import start_scheduler, stop_scheduler
from services.webhook import router as webhook_router

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Server started on port {settings.PORT}.")
    start_scheduler()
    yield
    # Shutdown
    logger.info("Server shutting down...")
    stop_scheduler()

app = FastAPI(title="SwitchBot Temperature Alert", lifespan=lifespan)

app.include_router(webhook_router)
app.include_router(api_router)

@app.get("/", response_class=PlainTextResponse)
async def root():
    return "SwitchBot Temperature Alert Server is running."

@app.get("/health")
async def health():
    return {"status": "ok", "alerting": poller.alerting}

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
