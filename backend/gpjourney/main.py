from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gpjourney.api.routes import assistant, doctor_visits, logs, medications, transfer
from gpjourney.core.config import settings
import logging

logging.basicConfig(
    level=logging.DEBUG if settings.APP_ENV == "development" else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
app = FastAPI(
    title="GP Journey API",
    description="Local single-user API for the GP Journey health journal",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(logs.router)
app.include_router(medications.router)
app.include_router(doctor_visits.router)
app.include_router(transfer.router)
app.include_router(assistant.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "gpjourney-api"}
