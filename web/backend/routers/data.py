from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from compass.workspace import Workspace
from web.backend.deps import get_workspace

router = APIRouter()


class ImportRequest(BaseModel):
    content: str  # the exported JSON text


@router.get("/export")
def export_data(ws: Workspace = Depends(get_workspace)):
    filename = f"compass-data-{date.today().isoformat()}.json"
    return Response(
        content=ws.data.export_data(),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import")
def import_data(req: ImportRequest, ws: Workspace = Depends(get_workspace)):
    if not ws.data.import_data(req.content):
        raise HTTPException(status_code=400, detail="Import failed: not a Compass export document")
    return {
        "success": True,
        "goals": len(ws.goals.goals),
        "tasks": len(ws.tasks.tasks),
    }


@router.post("/clear")
def clear_all_data(ws: Workspace = Depends(get_workspace)):
    ws.data.clear_all_data()
    return {"success": True}
