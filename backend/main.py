"""
Classroom Metrics — gradebook and attendance analytics for the class dashboard.
FastAPI backend entry point.
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routes.grades import router as grades_router
from routes.attendance import router as attendance_router
from routes.records import router as records_router
from routes.classroom import router as classroom_router, build_store
from store.memory import InMemoryRecordStore
from store.repository import ClassroomRepository

# Load environment
load_dotenv()

SCHOOL_NAME = os.getenv("SCHOOL_NAME", "My School")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper()
# Comma-separated allowed origins, e.g. http://localhost:5173,https://app.example.com
raw_origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
ALLOWED_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]
# Seed file for the in-memory store; empty string starts with an empty class.
SEED_FILE = os.getenv(
    "RECORD_STORE_SEED", str(Path(__file__).resolve().parent / "sample_data" / "classroom.json")
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOGGER = logging.getLogger(__name__)


def _load_seed(store):
    if not isinstance(store, InMemoryRecordStore) or not SEED_FILE:
        return
    path = Path(SEED_FILE)
    if not path.is_file():
        _LOGGER.warning("Seed file %s not found; starting with an empty store.", path)
        return
    store.seed(json.loads(path.read_text(encoding="utf-8")))
    _LOGGER.info("Seeded in-memory store from %s", path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = build_store()
    _load_seed(store)
    app.state.repository = ClassroomRepository(store)
    try:
        yield
    finally:
        store.close()


app = FastAPI(
    title="Classroom Metrics API",
    description=(
        "Grade averages, letter grades, attendance rates, trend lines and "
        "roster sorting for the classroom dashboard."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# CORS — allow the React dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route modules
app.include_router(grades_router, prefix="/api/grades", tags=["Grades"])
app.include_router(attendance_router, prefix="/api/attendance", tags=["Attendance"])
app.include_router(records_router, prefix="/api/records", tags=["Records"])
app.include_router(classroom_router, prefix="/api/classroom", tags=["Classroom"])


@app.get("/api/health")
async def health_check():
    return {
        "status": "ok",
        "school_name": SCHOOL_NAME,
        "record_store": os.getenv("RECORD_STORE", "memory"),
    }


@app.get("/api/config")
async def get_config():
    """Return server configuration to the frontend."""
    return {
        "school_name": SCHOOL_NAME,
    }
