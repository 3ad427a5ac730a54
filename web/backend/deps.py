from fastapi import HTTPException, Request

from compass.exceptions import NotFoundError
from compass.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
    return request.app.state.workspace


def not_found(kind: str, entity_id: str) -> HTTPException:
    err = NotFoundError(kind, entity_id)
    return HTTPException(status_code=404, detail=err.get_user_message())
