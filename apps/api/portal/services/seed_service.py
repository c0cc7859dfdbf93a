"""Bootstrap data: default content types, first admin, sample content, guides."""

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from portal.db.enums import CmsRole
from portal.db.models import CmsAdmin, ContentType
from portal.schemas.cms import CmsAdminCreate
from portal.schemas.content import ContentItemCreate, ContentTypeCreate
from portal.services import cms_admin_service, content_service, content_type_service, guide_service

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@stampede.ai"
DEFAULT_ADMIN_PASSWORD = "admin123"


def _prop(type_: str, title: str) -> dict[str, str]:
    return {"type": type_, "title": title}


DEFAULT_CONTENT_TYPES: list[dict] = [
    {
        "name": "page_content",
        "display_name": "Page Content",
        "description": "Main page content like hero sections, descriptions, and copy",
        "schema": {
            "type": "object",
            "properties": {
                "title": _prop("string", "Title"),
                "subtitle": _prop("string", "Subtitle"),
                "description": _prop("string", "Description"),
                "buttonText": _prop("string", "Button Text"),
                "buttonUrl": _prop("string", "Button URL"),
            },
        },
    },
    {
        "name": "navigation",
        "display_name": "Navigation",
        "description": "Navigation menus, links, and routing configuration",
        "schema": {
            "type": "object",
            "properties": {
                "label": _prop("string", "Label"),
                "url": _prop("string", "URL"),
                "target": _prop("string", "Target"),
                "order": _prop("number", "Order"),
            },
        },
    },
    {
        "name": "media",
        "display_name": "Media",
        "description": "Images, videos, and other media assets",
        "schema": {
            "type": "object",
            "properties": {
                "url": _prop("string", "Media URL"),
                "alt": _prop("string", "Alt Text"),
                "caption": _prop("string", "Caption"),
                "type": _prop("string", "Media Type"),
            },
        },
    },
    {
        "name": "settings",
        "display_name": "Site Settings",
        "description": "Global site configuration and settings",
        "schema": {
            "type": "object",
            "properties": {
                "value": _prop("string", "Value"),
                "description": _prop("string", "Description"),
                "type": _prop("string", "Setting Type"),
            },
        },
    },
]

SAMPLE_CONTENT: list[dict] = [
    {
        "key": "home_hero",
        "title": "Home Page Hero Section",
        "content": {
            "title": "Kickstart Your Success with Stampede",
            "subtitle": "Your all-in-one hospitality partner",
            "description": (
                "Transform your venue with powerful tools for bookings, loyalty, "
                "marketing, and more. Get started in minutes, not months."
            ),
            "buttonText": "Get Started Now",
            "buttonUrl": "#get-started",
        },
    },
    {
        "key": "footer_content",
        "title": "Footer Content",
        "content": {
            "companyName": "Stampede",
            "description": "Your all-in-one hospitality partner helping venues grow and thrive.",
            "copyright": "© 2025 Stampede. All rights reserved.",
            "contactEmail": "support@stampede.ai",
        },
    },
]


@dataclass
class SeedResult:
    content_types: int = 0
    admin_created: bool = False
    content_items: int = 0
    guides: int = 0


def seed_cms(db: Session, admin_password: str = DEFAULT_ADMIN_PASSWORD) -> SeedResult:
    """
    Create whatever defaults are missing. Safe to run repeatedly.

    The default super admin is only created when no admin exists at all.
    """
    result = SeedResult()

    for definition in DEFAULT_CONTENT_TYPES:
        if content_type_service.get_content_type_by_name(db, definition["name"]):
            continue
        content_type_service.create_content_type(db, ContentTypeCreate(**definition))
        result.content_types += 1

    admin_count = db.execute(select(func.count(CmsAdmin.id))).scalar() or 0
    if admin_count == 0:
        cms_admin_service.create_admin(
            db,
            CmsAdminCreate(
                email=DEFAULT_ADMIN_EMAIL,
                password=admin_password,
                name="Super Admin",
                role=CmsRole.SUPER_ADMIN,
            ),
        )
        result.admin_created = True

    page_type = db.execute(
        select(ContentType).where(ContentType.name == "page_content")
    ).scalar_one_or_none()
    author = cms_admin_service.get_admin_by_email(db, DEFAULT_ADMIN_EMAIL)
    if page_type and author:
        for sample in SAMPLE_CONTENT:
            if content_service.get_item_by_key(db, sample["key"]):
                continue
            item, _ = content_service.create_item(
                db,
                ContentItemCreate(content_type_id=page_type.id, **sample),
                admin_id=author.id,
            )
            content_service.publish_item(db, item, author.id)
            result.content_items += 1

    db.commit()
    result.guides = guide_service.seed_default_guides(db)
    logger.info("CMS seed complete: %s", result)
    return result
