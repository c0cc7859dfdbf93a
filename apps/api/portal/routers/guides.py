"""Guides router - embedded guide links, admin-configurable."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from portal.core.deps import get_current_user, get_db, require_csrf_header, require_portal_admin
from portal.db.enums import GuideType
from portal.schemas.guide import GuideConfigCreate, GuideConfigRead, GuideConfigUpdate
from portal.services import guide_service

router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("", response_model=list[GuideConfigRead])
def list_guides(db: Session = Depends(get_db)):
    """Active guides."""
    return guide_service.list_guides(db)


@router.get("/{guide_type}", response_model=GuideConfigRead)
def get_guide(guide_type: GuideType, db: Session = Depends(get_db)):
    """Stored config for a guide, or its built-in default."""
    guide = guide_service.resolve_guide(db, guide_type.value)
    if guide is None:
        raise HTTPException(status_code=404, detail="Guide not found")
    return guide


@router.post(
    "",
    response_model=GuideConfigRead,
    status_code=201,
    dependencies=[Depends(require_portal_admin), Depends(require_csrf_header)],
)
def create_guide(data: GuideConfigCreate, db: Session = Depends(get_db)):
    try:
        return guide_service.create_guide(db, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch(
    "/{guide_id}",
    response_model=GuideConfigRead,
    dependencies=[Depends(require_portal_admin), Depends(require_csrf_header)],
)
def update_guide(guide_id: int, data: GuideConfigUpdate, db: Session = Depends(get_db)):
    guide = guide_service.get_guide(db, guide_id)
    if not guide:
        raise HTTPException(status_code=404, detail="Guide not found")
    return guide_service.update_guide(db, guide, data)
