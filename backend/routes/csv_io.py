from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from backend.auth import require_user_email
from backend.schemas import CsvImportPayload, CsvImportResponse
from backend import repositories
from timeline.csv_codec import build_csv, import_csv
from timeline.errors import CsvFormatError
from timeline.model import safe_file_name

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/projects/{project_id}/export.csv")
async def export_csv(project_id: str, user_email: str = Depends(require_user_email)):
    project = await repositories.load_project(user_email, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    filename = f"{safe_file_name(project.name)}.csv"
    return Response(
        content=build_csv(project).encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"},
    )


@router.post("/v1/projects/{project_id}/import", response_model=CsvImportResponse)
async def import_project_csv(
    project_id: str,
    payload: CsvImportPayload,
    user_email: str = Depends(require_user_email),
):
    project = await repositories.load_project(user_email, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    try:
        result = import_csv(project, payload.csv)
    except CsvFormatError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    document = await repositories.save_project(user_email, project_id, result.project)
    if document is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return {
        "added_tasks": len(result.added_tasks),
        "added_topics": [topic.as_dict() for topic in result.added_topics],
        "skipped_rows": result.skipped_rows,
        "project": document,
    }
