# cozinha/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cozinha.app.config import settings
from cozinha.app.routers.favorites import router as favorites_router
from cozinha.app.routers.kitchen import router as kitchen_router
from cozinha.app.routers.tips import router as tips_router

# Logging simples no stdout (bom para dev e containers)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="Cozinha API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(kitchen_router)
app.include_router(favorites_router)
app.include_router(tips_router)


@app.get("/health")
def health():
    return {"ok": True}
