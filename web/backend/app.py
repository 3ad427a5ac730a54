import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from compass.logger import get_logger
from compass.workspace import Workspace
from web.backend.routers import data, goals, profile, progress, tasks

logger = get_logger("api")


def create_app(workspace: Optional[Workspace] = None) -> FastAPI:
    app = FastAPI(title="Compass API", version="1.0")
    app.state.workspace = workspace or Workspace.open()
    logger.info("Workspace ready: %d goals, %d tasks",
                len(app.state.workspace.goals.goals), len(app.state.workspace.tasks.tasks))

    raw_origins = os.getenv("COMPASS_ALLOWED_ORIGINS", "*")
    allow_origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    allow_credentials = "*" not in allow_origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "service": "Compass"}

    app.include_router(goals.router, prefix="/api/v1/goals", tags=["goals"])
    app.include_router(tasks.router, prefix="/api/v1/tasks", tags=["tasks"])
    app.include_router(data.router, prefix="/api/v1/data", tags=["data"])
    app.include_router(profile.router, prefix="/api/v1/profile", tags=["profile"])
    app.include_router(progress.router, prefix="/api/v1/progress", tags=["progress"])

    return app
