"""FastAPI application factory."""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

# Load .env file from project root (must be before other imports)
load_dotenv()
import uvicorn  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from airlift.api.routes import aircraft, allocations  # noqa: E402
from airlift.reference.aircraft_profiles import AIRCRAFT_PROFILES  # noqa: E402
from airlift.settings import get_settings  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Capture settings and report the loaded reference profiles on startup."""
    logger = logging.getLogger(__name__)
    settings = get_settings()
    logging.getLogger("airlift").setLevel(settings.log_level)
    logger.info(
        "Airlift API ready: %d aircraft profiles, cap %d aircraft per phase",
        len(AIRCRAFT_PROFILES),
        settings.max_aircraft_per_phase,
    )
    app.state.settings = settings
    yield


app = FastAPI(
    title="Airlift Load Planner API",
    description="Aircraft load allocation and weight & balance solver",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(aircraft.router, prefix="/api")
app.include_router(allocations.router, prefix="/api")


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "aircraft_types": sorted(AIRCRAFT_PROFILES),
    }


def serve(argv: list[str] | None = None) -> None:
    """Run the API under uvicorn (``airlift-serve``)."""
    parser = argparse.ArgumentParser(description="Airlift load planner API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)
    uvicorn.run(app, host=args.host, port=args.port, log_level=get_settings().log_level.lower())


if __name__ == "__main__":
    serve()
