# -*- coding: utf-8 -*-
# backend/app.py – FastAPI/uvicorn entry point
import logging
import os
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from backend.core.config import LOG_DIR, settings, ensure_dirs
from backend.core.db import init_db
from backend.routers import api

logger = logging.getLogger("backend")

app = FastAPI(title="Office Climate Controller", version="1.0.0")

# CORS (sensors and the socket script call in from other hosts)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Local frontend
frontend_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "frontend"))
if os.path.isdir(frontend_dir):
    app.mount("/static", StaticFiles(directory=frontend_dir), name="static")
else:
    logger.info("Static frontend directory not found; skipping /static mount")

# Routers
app.include_router(api.router, prefix="/api", tags=["api"])


def configure_logging():
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    if not any(type(h) is logging.StreamHandler for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        root.addHandler(console)
    log_file = LOG_DIR / "system.log"
    if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


@app.on_event("startup")
async def on_startup():
    ensure_dirs()
    configure_logging()
    init_db()
    logger.info("Office climate controller started (db: %s)", settings.db_path)


@app.get("/")
async def index():
    return {"ok": True, "message": "Office climate controller running. Open /static/index.html"}
