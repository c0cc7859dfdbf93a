"""Content type service - schemas for CMS content and write-time validation."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from portal.db.models import ContentType
from portal.schemas.content import ContentTypeCreate, ContentTypeUpdate


class ContentValidationError(ValueError):
    """Content does not match its content type's schema."""


_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
    "object": (dict,),
    "array": (list,),
}


def list_content_types(db: Session, include_inactive: bool = False) -> list[ContentType]:
    """Content types ordered by display name (active only by default)."""
    stmt = select(ContentType)
    if not include_inactive:
        stmt = stmt.where(ContentType.is_active.is_(True))
    return list(db.execute(stmt.order_by(ContentType.display_name)).scalars().all())


def get_content_type(db: Session, content_type_id: int) -> ContentType | None:
    return db.get(ContentType, content_type_id)


def get_content_type_by_name(db: Session, name: str) -> ContentType | None:
    return db.execute(
        select(ContentType).where(ContentType.name == name)
    ).scalar_one_or_none()


def validate_schema(schema: dict[str, Any]) -> None:
    """Check a content type schema is an object schema we know how to enforce."""
    if not isinstance(schema, dict):
        raise ValueError("Schema must be an object")
    if schema.get("type", "object") != "object":
        raise ValueError("Schema type must be 'object'")
    properties = schema.get("properties", {})
    if not isinstance(properties, dict):
        raise ValueError("Schema properties must be an object")
    for name, prop in properties.items():
        if not isinstance(prop, dict):
            raise ValueError(f"Schema property '{name}' must be an object")
        prop_type = prop.get("type")
        if prop_type is not None and prop_type not in _JSON_TYPES:
            raise ValueError(f"Unsupported type for '{name}': {prop_type}")
        if "enum" in prop and not isinstance(prop["enum"], list):
            raise ValueError(f"Schema enum for '{name}' must be a list")
    required = schema.get("required", [])
    if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
        raise ValueError("Schema required must be a list of property names")


def validate_content(schema: dict[str, Any], content: Any) -> None:
    """
    Validate item content against its content type schema.

    Declared properties are type-checked and `required` is enforced.
    Keys the schema does not declare are allowed.

    Raises:
        ContentValidationError: on the first mismatch
    """
    if not isinstance(content, dict):
        raise ContentValidationError("Content must be an object")

    properties = schema.get("properties") or {}
    for name in schema.get("required") or []:
        if content.get(name) in (None, ""):
            label = (properties.get(name) or {}).get("title", name)
            raise ContentValidationError(f"Missing required field: {label}")

    for name, prop in properties.items():
        value = content.get(name)
        if value is None:
            continue
        _validate_property(name, prop, value)


def _validate_property(name: str, prop: dict[str, Any], value: Any) -> None:
    prop_type = prop.get("type")
    if prop_type is None:
        return
    label = prop.get("title", name)
    expected = _JSON_TYPES[prop_type]
    # bool is an int subclass; only accept it where boolean is declared
    if isinstance(value, bool) and prop_type != "boolean":
        raise ContentValidationError(f"Field '{label}' must be of type {prop_type}")
    if not isinstance(value, expected):
        raise ContentValidationError(f"Field '{label}' must be of type {prop_type}")
    allowed = prop.get("enum")
    if allowed and value not in allowed:
        raise ContentValidationError(f"Field '{label}' must be one of: {', '.join(map(str, allowed))}")


def create_content_type(db: Session, data: ContentTypeCreate) -> ContentType:
    """Create a content type. Caller commits."""
    validate_schema(data.schema_)
    if get_content_type_by_name(db, data.name):
        raise ValueError(f"Content type '{data.name}' already exists")
    content_type = ContentType(
        name=data.name,
        display_name=data.display_name,
        description=data.description,
        schema=data.schema_,
    )
    db.add(content_type)
    db.flush()
    return content_type


def update_content_type(
    db: Session, content_type: ContentType, data: ContentTypeUpdate
) -> ContentType:
    """
    Update a content type. Caller commits.

    A new schema applies to future writes; existing items are not re-validated.
    """
    updates = data.model_dump(exclude_unset=True)
    if "schema_" in updates:
        if updates["schema_"] is None:
            raise ValueError("Schema cannot be null")
        validate_schema(updates["schema_"])
        content_type.schema = updates.pop("schema_")
    for field, value in updates.items():
        if field in {"display_name", "is_active"} and value is None:
            continue
        setattr(content_type, field, value)
    db.flush()
    return content_type
