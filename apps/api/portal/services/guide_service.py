"""Guide configuration service.

Admins may override each guide's title/URL; anything not stored falls
back to the built-in defaults below.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.db.enums import GuideType
from portal.db.models import GuideConfig
from portal.schemas.guide import GuideConfigCreate, GuideConfigUpdate

DEFAULT_GUIDE_CONFIGS: dict[str, dict[str, str]] = {
    GuideType.OVERVIEW.value: {
        "title": "Stampede Onboarding Journey",
        "description": "Your complete step-by-step guide to getting started with Stampede",
        "url": "internal://overview",
    },
    GuideType.BOOKINGS.value: {
        "title": "Table Bookings Readiness Guide",
        "description": "Learn how to set up and manage your booking system effectively",
        "url": "https://h.stampede.ai/table-bookings-readiness?hs_preview=XqvGJPfp-224913439982",
    },
    GuideType.LOYALTY.value: {
        "title": "Loyalty Program Setup",
        "description": "Configure your customer loyalty and rewards system",
        "url": "https://h.stampede.ai/loyalty",
    },
    GuideType.MARKETING.value: {
        "title": "Marketing Readiness Guide",
        "description": "Set up campaigns and customer communication tools",
        "url": "https://h.stampede.ai/marketing-readiness?hs_preview=ivCspIml-224924145856",
    },
}


def default_guide(guide_type: str) -> dict | None:
    """Built-in config for a guide type, shaped like GuideConfigRead."""
    config = DEFAULT_GUIDE_CONFIGS.get(guide_type)
    if not config:
        return None
    return {"id": None, "guide_type": guide_type, "is_active": True, "updated_at": None, **config}


def list_guides(db: Session, include_inactive: bool = False) -> list[GuideConfig]:
    stmt = select(GuideConfig)
    if not include_inactive:
        stmt = stmt.where(GuideConfig.is_active.is_(True))
    return list(db.execute(stmt.order_by(GuideConfig.id)).scalars().all())


def get_guide(db: Session, guide_id: int) -> GuideConfig | None:
    return db.get(GuideConfig, guide_id)


def get_guide_by_type(db: Session, guide_type: str) -> GuideConfig | None:
    return db.execute(
        select(GuideConfig).where(GuideConfig.guide_type == guide_type)
    ).scalar_one_or_none()


def resolve_guide(db: Session, guide_type: str) -> GuideConfig | dict | None:
    """Stored active config for a guide type, else the built-in default."""
    stored = get_guide_by_type(db, guide_type)
    if stored and stored.is_active:
        return stored
    return default_guide(guide_type)


def create_guide(db: Session, data: GuideConfigCreate) -> GuideConfig:
    if get_guide_by_type(db, data.guide_type.value):
        raise ValueError(f"Guide '{data.guide_type.value}' already configured")
    guide = GuideConfig(
        guide_type=data.guide_type.value,
        title=data.title,
        description=data.description,
        url=data.url,
        is_active=data.is_active,
    )
    db.add(guide)
    db.commit()
    db.refresh(guide)
    return guide


def update_guide(db: Session, guide: GuideConfig, data: GuideConfigUpdate) -> GuideConfig:
    updates = data.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if value is None and field != "description":
            continue
        setattr(guide, field, value)
    db.commit()
    db.refresh(guide)
    return guide


def seed_default_guides(db: Session) -> int:
    """Insert any missing default guides. Returns number created."""
    created = 0
    for guide_type, config in DEFAULT_GUIDE_CONFIGS.items():
        if get_guide_by_type(db, guide_type):
            continue
        db.add(GuideConfig(guide_type=guide_type, is_active=True, **config))
        created += 1
    db.commit()
    return created
