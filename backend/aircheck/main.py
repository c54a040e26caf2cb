"""
Aircheck API application: blower-door, ventilation and duct leakage endpoints.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aircheck.api.router import router
from aircheck.config import CORS_ORIGINS

app = FastAPI(
    title="Aircheck API",
    description="Blower-door, ventilation and duct leakage compliance engine",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

app.include_router(router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "aircheck"}
