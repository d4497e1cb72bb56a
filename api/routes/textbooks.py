from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from course_reader.textbook import Textbook, audit_editorial_markdown

from api.dependencies import get_engine

router = APIRouter(prefix="/textbooks", tags=["textbooks"])


class ModuleContent(BaseModel):
    content: str
    title: str = ""
    locale: str = "en"
    visual_slots: List[Dict[str, Any]] = Field(default_factory=list)


class SearchRequest(ModuleContent):
    query: str


class AuditRequest(BaseModel):
    content: str


def _build(payload: ModuleContent) -> Textbook:
    try:
        return get_engine().build(
            payload.content,
            title=payload.title,
            locale=payload.locale,
            visual_slots=payload.visual_slots,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.post("/paginate")
def paginate_module(payload: ModuleContent):
    return _build(payload).to_dict()


@router.post("/search")
def search_module(payload: SearchRequest):
    if not payload.query or not payload.query.strip():
        raise HTTPException(status_code=400, detail="Query must not be empty")
    textbook = _build(payload)
    return {"query": payload.query, "pages": textbook.search(payload.query)}


@router.post("/audit")
def audit_module(payload: AuditRequest):
    return {"issues": [issue.to_dict() for issue in audit_editorial_markdown(payload.content)]}
