from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from backend.auth import require_user_email
from backend.schemas import ProjectCreate, ProjectUpdate, ProjectDocument, ProjectListResponse
from backend import repositories
from timeline.model import normalize_project

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/projects", response_model=ProjectListResponse)
async def list_projects(user_email: str = Depends(require_user_email)):
    items = await repositories.list_projects(user_email)
    return {"items": items}


@router.post("/v1/projects", response_model=ProjectDocument)
async def create_project(payload: ProjectCreate, user_email: str = Depends(require_user_email)):
    if not payload.name.strip():
        raise HTTPException(status_code=400, detail="Project name is required")
    try:
        return await repositories.create_project(user_email, payload.name)
    except Exception as exc:
        logger.exception("Failed to create project: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.get("/v1/projects/{project_id}", response_model=ProjectDocument)
async def get_project(project_id: str, user_email: str = Depends(require_user_email)):
    document = await repositories.get_project(user_email, project_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return document


@router.put("/v1/projects/{project_id}", response_model=ProjectDocument)
async def save_project(project_id: str, payload: ProjectUpdate, user_email: str = Depends(require_user_email)):
    data = payload.model_dump()
    if payload.name is None:
        existing = await repositories.get_project(user_email, project_id)
        if existing is None:
            raise HTTPException(status_code=404, detail="Project not found")
        data["name"] = existing["name"]
    project = normalize_project(data)
    try:
        document = await repositories.save_project(user_email, project_id, project)
    except Exception as exc:
        logger.exception("Failed to save project %s: %s", project_id, exc)
        raise HTTPException(status_code=500, detail="Internal error")
    if document is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return document


@router.delete("/v1/projects/{project_id}")
async def delete_project(project_id: str, user_email: str = Depends(require_user_email)):
    deleted = await repositories.delete_project(user_email, project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")
    return {"ok": True}
