from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from blogops.api.deps import get_repository
from blogops.core.content import lint_content

router = APIRouter(prefix="/api/v1", tags=["Content"])


@router.get("/posts")
def posts_list(
    section: Optional[str] = Query(None),
    tag: Optional[str] = Query(None),
    drafts: bool = Query(True),
):
    repo = get_repository()
    pages = repo.pages(section=section, tag=tag, include_drafts=drafts)
    return {"count": len(pages), "posts": [p.summary() for p in pages]}


@router.get("/posts/{section}/{slug}")
def posts_get(section: str, slug: str):
    page = get_repository().find(section, slug)
    if page is None:
        raise HTTPException(status_code=404, detail="post not found")
    return {**page.summary(), "body": page.body}


@router.get("/tags")
def tags_list():
    return {"tags": get_repository().tags()}


@router.get("/sections")
def sections_list():
    return {"sections": get_repository().sections()}


@router.get("/lint")
def lint():
    report = lint_content(get_repository())
    return {"ok": report.ok, "counts": report.counts(), **report.model_dump()}
