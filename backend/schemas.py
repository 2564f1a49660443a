from __future__ import annotations

from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field


class TopicPayload(BaseModel):
    id: str = ""
    name: str = ""
    color: str = ""


class TaskPayload(BaseModel):
    id: str = ""
    topicId: str = ""
    title: str = ""
    desc: str = ""
    start: str = ""
    end: str = ""


class ProjectCreate(BaseModel):
    name: str


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    topics: List[TopicPayload] = Field(default_factory=list)
    tasks: List[TaskPayload] = Field(default_factory=list)


class ProjectSummary(BaseModel):
    id: str
    name: str
    updatedAt: Optional[str] = None


class ProjectDocument(BaseModel):
    id: str
    name: str
    topics: List[Dict[str, Any]]
    tasks: List[Dict[str, Any]]
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class ProjectListResponse(BaseModel):
    items: List[ProjectSummary]


class CsvImportPayload(BaseModel):
    csv: str


class CsvImportResponse(BaseModel):
    added_tasks: int
    added_topics: List[Dict[str, Any]]
    skipped_rows: int
    project: ProjectDocument
