from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from compass.exceptions import HierarchyCycleError
from compass.models import GoalStatus, goal_to_dict
from compass.schema import GoalCreate, GoalPatch
from compass.workspace import Workspace
from web.backend.deps import get_workspace, not_found

router = APIRouter()


@router.get("/")
def list_goals(status: Optional[GoalStatus] = None, ws: Workspace = Depends(get_workspace)):
    return {"goals": [goal_to_dict(g) for g in ws.goals.list_goals(status=status)]}


@router.post("/", status_code=201)
def create_goal(req: GoalCreate, ws: Workspace = Depends(get_workspace)):
    goal = ws.goals.add_goal(req)
    return goal_to_dict(goal)


@router.get("/tree")
def goal_tree(ws: Workspace = Depends(get_workspace)):
    return {"tree": ws.goals.get_goal_tree()}


@router.get("/{goal_id}")
def get_goal(goal_id: str, ws: Workspace = Depends(get_workspace)):
    goal = ws.goals.get_goal(goal_id)
    if goal is None:
        raise not_found("Goal", goal_id)
    return goal_to_dict(goal)


@router.patch("/{goal_id}")
def update_goal(goal_id: str, req: GoalPatch, ws: Workspace = Depends(get_workspace)):
    goal = ws.goals.update_goal(goal_id, req)
    if goal is None:
        raise not_found("Goal", goal_id)
    return goal_to_dict(goal)


@router.delete("/{goal_id}")
def delete_goal(goal_id: str, ws: Workspace = Depends(get_workspace)):
    """Delete the goal and every task attached to it."""
    before = len(ws.tasks.tasks)
    if not ws.goals.delete_goal(goal_id):
        raise not_found("Goal", goal_id)
    return {"success": True, "tasks_deleted": before - len(ws.tasks.tasks)}


@router.get("/{goal_id}/hierarchy")
def goal_hierarchy(goal_id: str, ws: Workspace = Depends(get_workspace)):
    try:
        chain = ws.goals.get_goal_hierarchy(goal_id)
    except HierarchyCycleError as e:
        raise HTTPException(status_code=409, detail=e.get_user_message())
    return {"hierarchy": [goal_to_dict(g) for g in chain]}


@router.get("/{goal_id}/children")
def goal_children(goal_id: str, ws: Workspace = Depends(get_workspace)):
    return {"children": [goal_to_dict(g) for g in ws.goals.get_children(goal_id)]}
