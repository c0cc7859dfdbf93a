"""Public content router - published CMS content for the portal pages."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from portal.core.deps import get_db
from portal.schemas.content import PublicContentRead
from portal.services import content_service

router = APIRouter(prefix="/api/content", tags=["content"])


@router.get("", response_model=dict[str, PublicContentRead])
def get_many(
    keys: str = Query(..., description="Comma-separated content keys"),
    db: Session = Depends(get_db),
):
    """Published items keyed by key. Unknown or unpublished keys are omitted."""
    wanted = [k.strip() for k in keys.split(",") if k.strip()]
    items = content_service.get_published_items(db, wanted)
    return {item.key: item for item in items}


@router.get("/{key}", response_model=PublicContentRead)
def get_one(key: str, db: Session = Depends(get_db)):
    item = content_service.get_published_item(db, key)
    if not item:
        raise HTTPException(status_code=404, detail="Content not found")
    return item
