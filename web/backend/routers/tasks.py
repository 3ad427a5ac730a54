from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from compass.models import TaskStatus, task_to_dict
from compass.recurrence import expand_tasks, instances_between
from compass.schema import TaskCreate, TaskPatch, VisionConnectionModel
from compass.workspace import Workspace
from web.backend.deps import get_workspace, not_found

router = APIRouter()


class CreateTaskRequest(TaskCreate):
    auto_connect: bool = False


class VisionConnectionRequest(BaseModel):
    connection: Optional[VisionConnectionModel] = None


class StatusRequest(BaseModel):
    status: TaskStatus


@router.get("/")
def list_tasks(
    goal_id: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    expand: bool = False,
    ws: Workspace = Depends(get_workspace),
):
    """Stored tasks; with expand=true recurring tasks are returned as their instances."""
    tasks = ws.tasks.list_tasks(goal_id=goal_id, status=status)
    if expand:
        tasks = expand_tasks(tasks)
    return {"tasks": [task_to_dict(t) for t in tasks]}


@router.post("/", status_code=201)
def create_task(req: CreateTaskRequest, ws: Workspace = Depends(get_workspace)):
    fields = TaskCreate.model_validate(req.model_dump(exclude={"auto_connect"}))
    task = ws.tasks.add_task(fields, auto_connect=req.auto_connect)
    return task_to_dict(task)


@router.get("/today")
def todays_tasks(
    include_completed: bool = True,
    expand: bool = False,
    ws: Workspace = Depends(get_workspace),
):
    if expand:
        tasks = ws.tasks.get_todays_instances()
        if not include_completed:
            tasks = [t for t in tasks if t.status != TaskStatus.COMPLETED]
    else:
        tasks = ws.tasks.get_todays_tasks(include_completed=include_completed)
    return {"date": date.today().isoformat(), "tasks": [task_to_dict(t) for t in tasks]}


@router.get("/vision")
def tasks_with_vision(ws: Workspace = Depends(get_workspace)):
    tasks = ws.tasks.get_tasks_with_vision_connection()
    return {
        "tasks": [
            {**task_to_dict(t), "impact": ws.tasks.calculate_task_impact_score(t)}
            for t in tasks
        ]
    }


@router.get("/calendar")
def calendar(start: date, end: date, ws: Workspace = Depends(get_workspace)):
    if end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")
    instances = instances_between(ws.tasks.tasks, start, end)
    return {"start": start.isoformat(), "end": end.isoformat(), "tasks": [task_to_dict(t) for t in instances]}


@router.get("/{task_id}")
def get_task(task_id: str, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.get_task(task_id)
    if task is None:
        raise not_found("Task", task_id)
    return task_to_dict(task)


@router.patch("/{task_id}")
def update_task(task_id: str, req: TaskPatch, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.update_task(task_id, req)
    if task is None:
        raise not_found("Task", task_id)
    return task_to_dict(task)


@router.delete("/{task_id}")
def delete_task(task_id: str, ws: Workspace = Depends(get_workspace)):
    if not ws.tasks.delete_task(task_id):
        raise not_found("Task", task_id)
    return {"success": True}


@router.post("/{task_id}/status")
def set_status(task_id: str, req: StatusRequest, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.set_task_status(task_id, req.status)
    if task is None:
        raise not_found("Task", task_id)
    return task_to_dict(task)


@router.post("/{task_id}/toggle")
def toggle_complete(task_id: str, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.toggle_task_complete(task_id)
    if task is None:
        raise not_found("Task", task_id)
    return task_to_dict(task)


@router.put("/{task_id}/vision-connection")
def set_vision_connection(task_id: str, req: VisionConnectionRequest, ws: Workspace = Depends(get_workspace)):
    connection = req.connection.to_json_fields(exclude_unset=False) if req.connection else None
    task = ws.tasks.update_task_vision_connection(task_id, connection)
    if task is None:
        raise not_found("Task", task_id)
    return task_to_dict(task)


@router.get("/{task_id}/impact")
def impact_score(task_id: str, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.get_task(task_id)
    if task is None:
        raise not_found("Task", task_id)
    return {"id": task_id, "impact": ws.tasks.calculate_task_impact_score(task)}


@router.get("/{task_id}/path")
def hierarchy_path(task_id: str, ws: Workspace = Depends(get_workspace)):
    return ws.tasks.get_task_hierarchy_path(task_id)


@router.get("/{task_id}/instances")
def task_instances(task_id: str, ws: Workspace = Depends(get_workspace)):
    task = ws.tasks.get_task(task_id)
    if task is None:
        raise not_found("Task", task_id)
    return {"instances": [task_to_dict(t) for t in ws.tasks.get_task_instances(task_id)]}
