from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.encoders import jsonable_encoder

from backend.auth import require_user_email
from backend.settings import get_settings
from backend import repositories
from timeline.layout import ViewConfig, compute_layout

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/v1/projects/{project_id}/layout")
async def get_layout(
    project_id: str,
    day_width: Optional[int] = Query(default=None),
    viewport_width: Optional[float] = Query(default=None),
    mirrored: Optional[bool] = Query(default=None),
    visible: Optional[List[str]] = Query(default=None),
    today: Optional[date] = Query(default=None),
    user_email: str = Depends(require_user_email),
):
    project = await repositories.load_project(user_email, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    settings = get_settings()
    view = ViewConfig(
        day_width=day_width if day_width is not None else settings.default_day_width,
        viewport_width=viewport_width if viewport_width is not None else settings.default_viewport_width,
        mirrored=settings.mirrored_axis if mirrored is None else mirrored,
        visible_topic_ids=frozenset(visible) if visible is not None else None,
        today=today,
    )
    layout = compute_layout(project, view)
    logger.debug("Layout for %s: %d days, %d blocks", project_id, len(layout.days), len(layout.blocks))
    return jsonable_encoder(layout.as_dict())
