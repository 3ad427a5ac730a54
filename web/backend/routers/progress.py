from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends

from compass.progress import dashboard_summary, goal_progress, time_slots
from compass.workspace import Workspace
from web.backend.deps import get_workspace

router = APIRouter()


@router.get("/summary")
def summary(ws: Workspace = Depends(get_workspace)):
    goals, tasks = ws.goals.goals, ws.tasks.tasks
    return {
        **dashboard_summary(goals, tasks),
        "goals": goal_progress(goals, tasks),
    }


@router.get("/schedule")
def schedule(day: Optional[date] = None, ws: Workspace = Depends(get_workspace)):
    return time_slots(ws.tasks.tasks, day or date.today())
