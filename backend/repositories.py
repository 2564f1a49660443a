from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import text as sql_text

from backend.db import get_sessionmaker
from timeline.model import Project, new_id, new_project, normalize_project

logger = logging.getLogger(__name__)

PROJECTS_TABLE = "gantt_projects"

PROJECT_SELECT_COLUMNS = [
    "id",
    "user_email",
    "name",
    "topics_json",
    "tasks_json",
    "created_at",
    "updated_at",
]


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _decode_list(raw) -> list:
    if not raw:
        return []
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Dropping undecodable project payload.")
        return []
    return payload if isinstance(payload, list) else []


def _encode(items: list) -> str:
    return json.dumps(items, ensure_ascii=False)


def _document_from_row(row: dict) -> dict:
    project = normalize_project(
        {
            "name": row.get("name"),
            "topics": _decode_list(row.get("topics_json")),
            "tasks": _decode_list(row.get("tasks_json")),
        }
    )
    return {
        "id": row["id"],
        **project.as_document(),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


async def list_projects(user_email: str) -> list[dict]:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT id, name, updated_at
                FROM {PROJECTS_TABLE}
                WHERE user_email = :user_email
                ORDER BY updated_at DESC
                """
            ),
            {"user_email": user_email},
        )).mappings().all()
    return [{"id": row["id"], "name": row["name"], "updatedAt": row["updated_at"]} for row in rows]


async def create_project(user_email: str, name: str) -> dict:
    project = new_project(name)
    now = _now_iso()
    document = project.as_document()
    payload = {
        "id": new_id(),
        "user_email": user_email,
        "name": project.name,
        "topics_json": _encode(document["topics"]),
        "tasks_json": _encode(document["tasks"]),
        "created_at": now,
        "updated_at": now,
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"INSERT INTO {PROJECTS_TABLE} ({', '.join(PROJECT_SELECT_COLUMNS)}) "
                f"VALUES ({', '.join(':' + col for col in PROJECT_SELECT_COLUMNS)})"
            ),
            payload,
        )
        await session.commit()
    logger.info("Created project %s for %s", payload["id"], user_email)
    return _document_from_row(payload)


async def get_project(user_email: str, project_id: str) -> dict | None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(PROJECT_SELECT_COLUMNS)} FROM {PROJECTS_TABLE} "
                "WHERE user_email = :user_email AND id = :id"
            ),
            {"user_email": user_email, "id": project_id},
        )).mappings().fetchone()
    return _document_from_row(dict(row)) if row else None


async def load_project(user_email: str, project_id: str) -> Project | None:
    document = await get_project(user_email, project_id)
    if document is None:
        return None
    return normalize_project(document)


async def save_project(user_email: str, project_id: str, project: Project) -> dict | None:
    document = project.as_document()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"""
                UPDATE {PROJECTS_TABLE}
                SET name = :name, topics_json = :topics_json, tasks_json = :tasks_json, updated_at = :updated_at
                WHERE user_email = :user_email AND id = :id
                """
            ),
            {
                "name": project.name,
                "topics_json": _encode(document["topics"]),
                "tasks_json": _encode(document["tasks"]),
                "updated_at": _now_iso(),
                "user_email": user_email,
                "id": project_id,
            },
        )
        await session.commit()
    if not result.rowcount:
        return None
    return await get_project(user_email, project_id)


async def delete_project(user_email: str, project_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {PROJECTS_TABLE} WHERE user_email = :user_email AND id = :id"),
            {"user_email": user_email, "id": project_id},
        )
        await session.commit()
    return bool(result.rowcount)
