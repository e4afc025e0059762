"""
Lune Labs Server
================

FastAPI server for the Lune Labs site and its Circle of Dots logo generator.

Features:
- Static marketing frontend (served when frontend/ exists)
- Parametric dot-grid layout with per-dot painting
- Confirmation gate for layout changes that would discard paint
- Pixel-snapped SVG and PNG export with presets, padding and backgrounds
"""

import os
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

# Configure logging
logging.basicConfig(
    level=os.getenv("LUNE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

from .canvas.state_manager import StateManager
from .services.export_compositor import ExportCompositor
from .models.canvas_models import PARAMETER_LIMITS
from .models.preset_models import ExportMode

# Import API routers
from .api import design_routes, export_routes

MAX_SESSIONS = int(os.getenv("LUNE_MAX_SESSIONS", "500"))
CORS_ORIGINS = [origin.strip() for origin in os.getenv("LUNE_CORS_ORIGINS", "*").split(",") if origin.strip()]


# Shared service instances
state_manager: StateManager = None
compositor: ExportCompositor = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global state_manager, compositor

    logger.info("[LUNE-LABS] Starting up...")

    state_manager = StateManager(max_sessions=MAX_SESSIONS)
    compositor = ExportCompositor()

    # Inject into route modules
    design_routes.state_manager = state_manager
    export_routes.compositor = compositor

    logger.info("[LUNE-LABS] Services initialized")

    yield

    logger.info("[LUNE-LABS] Shutting down...")
    design_routes.state_manager = None
    export_routes.compositor = None


# Create FastAPI app
app = FastAPI(
    title="Lune Labs",
    description="Lune Labs site and Circle of Dots logo generator",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(design_routes.router)
app.include_router(export_routes.router)


# Static files (frontend)
frontend_dir = Path(__file__).parent.parent / "frontend"
if frontend_dir.exists():
    app.mount("/static", StaticFiles(directory=str(frontend_dir)), name="static")


@app.get("/")
async def root():
    """Serve the frontend or return API info."""
    index_path = frontend_dir / "index.html"
    if index_path.exists():
        return FileResponse(str(index_path))
    return {
        "service": "Lune Labs",
        "version": "1.0.0",
        "status": "running",
        "frontend": "Frontend not found. Create frontend/index.html",
        "endpoints": {
            "logo": "/api/logo/{session_id}",
            "export": "/api/export/{session_id}",
            "presets": "/api/export/presets"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "lune-labs",
        "sessions": len(state_manager.list_sessions()) if state_manager else 0
    }


@app.get("/api/info")
async def api_info():
    """Get generator parameter ranges and export options."""
    return {
        "service": "Lune Labs",
        "version": "1.0.0",
        "generator": {
            "name": "Circle of Dots",
            "parameters": {
                name: {"min": low, "max": high}
                for name, (low, high) in PARAMETER_LIMITS.items()
            },
            "tool_modes": ["generate", "paint"]
        },
        "export": {
            "dimensions": {"min": 16, "max": 2000},
            "padding_percent": {"min": 0, "max": 40},
            "formats": ["svg", "png"],
            "modes": [mode.value for mode in ExportMode]
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "lune_labs.server:app",
        host=os.getenv("LUNE_HOST", "0.0.0.0"),
        port=int(os.getenv("LUNE_PORT", "8080")),
        reload=True
    )
