from fastapi import APIRouter, Depends

from compass.models import user_to_dict
from compass.schema import ProfilePatch
from compass.workspace import Workspace
from web.backend.deps import get_workspace

router = APIRouter()


@router.get("/")
def get_profile(ws: Workspace = Depends(get_workspace)):
    user = ws.profile.get_user()
    return {"user": user_to_dict(user) if user else None}


@router.patch("/")
def update_profile(req: ProfilePatch, ws: Workspace = Depends(get_workspace)):
    return {"user": user_to_dict(ws.profile.update_user(req))}
