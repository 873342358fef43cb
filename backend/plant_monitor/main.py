"""
Plant Monitor - Backend API
===========================
FastAPI application that collects readings from the plant-monitoring
microcontroller and serves them to the dashboard.

ARCHITECTURE:
    [Device (ESP32)] --POST /data------> [This Backend] --> [SQLite + log files]
    [Device (ESP32)] --GET /servo-check-> [This Backend]
    [Dashboard]      --GET /data, /data/history, /logs, POST /servo--> [This Backend]

    The device sends a line like:
        Moisture:512,MOIST,Light:700,BRIGHT,Water:45,MEDIUM,Temp:24.5,Humid:55,Servo:90

HOW TO RUN:
    # Install
    pip install -e .

    # Copy environment config (optional, defaults work)
    cp .env.example .env

    # Run the server
    uvicorn plant_monitor.main:app --host 0.0.0.0 --port 8080

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:8080/docs
    - ReDoc: http://localhost:8080/redoc
"""

import logging
import os
import sys
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plant_monitor import __version__
from plant_monitor.routers import data_router, servo_router, logs_router, set_plant_monitor
from plant_monitor.services import PlantMonitor


# Load environment variables from .env file
load_dotenv()


# =============================================================================
# CONFIGURATION
# =============================================================================

class Config:
    """
    Application configuration loaded from environment variables.

    Environment Variables:
        DATABASE_PATH: SQLite file for readings and logs
        LOG_DIR: Folder for daily text logs and the CSV export
        HISTORY_RETENTION_DAYS: Delete history older than this (0 = keep all)
        RETENTION_CHECK_HOURS: How often the retention job runs
        LOG_LEVEL: Python logging level
        FRONTEND_URL: URL of the dashboard for CORS
    """

    DATABASE_PATH = os.getenv("DATABASE_PATH", "data/plant_monitor.db")

    LOG_DIR = os.getenv("LOG_DIR", "logs")

    HISTORY_RETENTION_DAYS = int(os.getenv("HISTORY_RETENTION_DAYS", "0"))
    RETENTION_CHECK_HOURS = int(os.getenv("RETENTION_CHECK_HOURS", "24"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

    CORS_ORIGINS = [
        FRONTEND_URL,
        "http://localhost:3000",    # Next.js dashboard
        "http://127.0.0.1:3000",
    ]


logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    handlers=[logging.StreamHandler(sys.stderr)],
)
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    STARTUP:
        1. Create the PlantMonitor (opens the database, log folder)
        2. Inject it into the routers
        3. Start the retention job
        4. Write "Server initializing" / "Server started" log records

    SHUTDOWN:
        1. Write "Server shutting down"
        2. Stop background jobs
    """
    # ========== STARTUP ==========
    print("=" * 60)
    print("🌱 PLANT MONITOR - Starting Backend")
    print("=" * 60)

    monitor = PlantMonitor(
        db_path=Config.DATABASE_PATH,
        log_dir=Config.LOG_DIR,
        retention_days=Config.HISTORY_RETENTION_DAYS,
        retention_check_hours=Config.RETENTION_CHECK_HOURS,
    )
    monitor.recorder.record_system("Server initializing")

    set_plant_monitor(monitor)
    monitor.start()

    print("✅ Services initialized")
    print(f"   Database: {Config.DATABASE_PATH}")
    print(f"   Log folder: {Config.LOG_DIR}")
    if Config.HISTORY_RETENTION_DAYS > 0:
        print(f"   Retention: {Config.HISTORY_RETENTION_DAYS} days")
    else:
        print("   Retention: keep everything")
    print(f"   CORS origins: {len(Config.CORS_ORIGINS)} configured")
    print()
    print("📖 API Documentation: /docs")
    print("=" * 60)

    monitor.recorder.record_system("Server started", version=__version__)

    yield  # Application runs here

    # ========== SHUTDOWN ==========
    print()
    print("🛑 Shutting down...")
    monitor.recorder.record_system("Server shutting down")
    await monitor.shutdown()
    print("✅ Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

app = FastAPI(
    title="Plant Monitor API",
    description="""
## Overview

Backend for a plant-monitoring device. The device reports soil moisture,
light, water level, temperature, humidity and servo position; the
dashboard reads them and can move the servo.

## Device

| Method | Path | What |
|--------|------|------|
| POST | /data | Report a status line `{"data": "Moisture:512,MOIST,..."}` |
| GET | /servo-check | Pick up a pending servo position |

## Dashboard

| Method | Path | What |
|--------|------|------|
| GET | /data | Current reading |
| GET | /data/history | Stored readings (limit, skip) |
| GET | /logs | Audit log (type, limit, skip, startDate, endDate) |
| POST | /servo | Ask the device to move the servo `{"position": 90}` |
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

# Device ingestion + current/history reads
app.include_router(data_router)

# Servo mailbox
app.include_router(servo_router)

# Audit log
app.include_router(logs_router)


# =============================================================================
# ROOT ENDPOINTS
# =============================================================================

@app.get(
    "/",
    summary="API Information",
    description="Get basic API information and available endpoints."
)
async def root():
    """
    Root endpoint with API overview.
    """
    return {
        "name": "Plant Monitor API",
        "version": __version__,
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json"
        },
        "endpoints": {
            "report_data": "POST /data",
            "current_data": "GET /data",
            "history": "GET /data/history",
            "logs": "GET /logs",
            "set_servo": "POST /servo",
            "check_servo": "GET /servo-check",
        }
    }


@app.get(
    "/health",
    summary="Health Check",
    description="Check if the backend is running."
)
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "database": Config.DATABASE_PATH,
        "retention_days": Config.HISTORY_RETENTION_DAYS,
    }
