"""
Project resources — documents, calendar events and assets.

All three live under a project and share its lifecycle (deleted with it).
Callers have already passed `require_project_access` for `project_id`;
row lookups are scoped to that project so an id from another project is 404.
"""

import logging

from studioboard.core.exceptions import ValidationError
from studioboard.models import as_utc, db
from studioboard.models.project import (
    ASSET_STATUSES,
    ASSET_TYPES,
    EVENT_TYPES,
    Asset,
    CalendarEvent,
    Document,
)
from studioboard.services.helpers.queries import get_scoped
from studioboard.services.permission_service import Identity
from studioboard.services.user_service import ensure_users_exist
from studioboard.utils.helpers import (
    UNSET,
    choice,
    optional_text,
    parse_datetime,
    pick,
    require_text,
)

logger = logging.getLogger(__name__)


def _order(value):
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("order must be an integer", details={"order": value})
    return value


def _user_ref(value, field: str):
    if not optional_text(value, field):
        return None
    ensure_users_exist([value])
    return value


# ═══════════════════════════════════════════════════════════════
# Documents
# ═══════════════════════════════════════════════════════════════
def list_documents(project_id: str) -> list[Document]:
    return (
        Document.query.filter_by(project_id=project_id)
        .order_by(Document.doc_order.asc(), Document.created_at.asc())
        .all()
    )


def create_document(identity: Identity, project_id: str, data: dict) -> Document:
    doc = Document(
        project_id=project_id,
        title=require_text(data, "title")["title"],
        markdown=optional_text(data.get("markdown"), "markdown") or "",
        created_by=identity.id,
        doc_order=_order(data.get("order")),
    )
    db.session.add(doc)
    db.session.flush()
    return doc


def update_document(project_id: str, doc_id: str, data: dict) -> Document:
    doc = get_scoped(Document, doc_id, project_id=project_id)
    title = pick(data, "title")
    if title:
        doc.title = optional_text(title, "title").strip() or doc.title
    markdown = pick(data, "markdown")
    if markdown is not UNSET:
        doc.markdown = optional_text(markdown, "markdown") or ""
    order = pick(data, "order")
    if order is not UNSET and order is not None:
        doc.doc_order = _order(order)
    db.session.flush()
    return doc


def delete_document(project_id: str, doc_id: str) -> None:
    db.session.delete(get_scoped(Document, doc_id, project_id=project_id))


# ═══════════════════════════════════════════════════════════════
# Calendar events
# ═══════════════════════════════════════════════════════════════
def _check_event_dates(event: CalendarEvent):
    if as_utc(event.end_date) < as_utc(event.start_date):
        raise ValidationError("endDate must not be before startDate")


def list_events(project_id: str) -> list[CalendarEvent]:
    return (
        CalendarEvent.query.filter_by(project_id=project_id)
        .order_by(CalendarEvent.start_date.asc())
        .all()
    )


def create_event(identity: Identity, project_id: str, data: dict) -> CalendarEvent:
    fields = require_text(data, "title", "startDate", "endDate")
    event = CalendarEvent(
        project_id=project_id,
        title=fields["title"],
        description=optional_text(data.get("description"), "description"),
        start_date=parse_datetime(fields["startDate"], "startDate"),
        end_date=parse_datetime(fields["endDate"], "endDate"),
        user_id=_user_ref(data.get("userId"), "userId") or identity.id,
        type=choice(data.get("type") or "other", sorted(EVENT_TYPES), "type"),
    )
    _check_event_dates(event)
    db.session.add(event)
    db.session.flush()
    return event


def update_event(project_id: str, event_id: str, data: dict) -> CalendarEvent:
    event = get_scoped(CalendarEvent, event_id, project_id=project_id)
    title = pick(data, "title")
    if title:
        event.title = optional_text(title, "title").strip() or event.title
    description = pick(data, "description")
    if description is not UNSET:
        event.description = optional_text(description, "description")
    start = pick(data, "startDate")
    if start:
        event.start_date = parse_datetime(start, "startDate")
    end = pick(data, "endDate")
    if end:
        event.end_date = parse_datetime(end, "endDate")
    event_type = pick(data, "type")
    if event_type:
        event.type = choice(event_type, sorted(EVENT_TYPES), "type")
    user_id = pick(data, "userId")
    if user_id:
        event.user_id = _user_ref(user_id, "userId")
    _check_event_dates(event)
    db.session.flush()
    return event


def delete_event(project_id: str, event_id: str) -> None:
    db.session.delete(get_scoped(CalendarEvent, event_id, project_id=project_id))


# ═══════════════════════════════════════════════════════════════
# Assets
# ═══════════════════════════════════════════════════════════════
def list_assets(project_id: str) -> list[Asset]:
    return (
        Asset.query.filter_by(project_id=project_id)
        .order_by(Asset.created_at.desc())
        .all()
    )


def create_asset(project_id: str, data: dict) -> Asset:
    asset = Asset(
        project_id=project_id,
        name=require_text(data, "name")["name"],
        type=choice(data.get("type") or "other", sorted(ASSET_TYPES), "type"),
        status=choice(data.get("status") or "concept", sorted(ASSET_STATUSES), "status"),
        assigned_to=_user_ref(data.get("assignedTo"), "assignedTo"),
        version=optional_text(data.get("version"), "version") or "1.0",
        file_url=optional_text(data.get("fileUrl"), "fileUrl"),
        thumbnail=optional_text(data.get("thumbnail"), "thumbnail"),
    )
    db.session.add(asset)
    db.session.flush()
    logger.info("Asset %s created in project %s", asset.id, project_id)
    return asset


def update_asset(project_id: str, asset_id: str, data: dict) -> Asset:
    asset = get_scoped(Asset, asset_id, project_id=project_id)
    name = pick(data, "name")
    if name:
        asset.name = optional_text(name, "name").strip() or asset.name
    asset_type = pick(data, "type")
    if asset_type:
        asset.type = choice(asset_type, sorted(ASSET_TYPES), "type")
    status = pick(data, "status")
    if status:
        asset.status = choice(status, sorted(ASSET_STATUSES), "status")
    assigned = pick(data, "assignedTo")
    if assigned is not UNSET:
        asset.assigned_to = _user_ref(assigned, "assignedTo")
    version = pick(data, "version")
    if version:
        asset.version = optional_text(version, "version")
    for key, attr in (("fileUrl", "file_url"), ("thumbnail", "thumbnail")):
        value = pick(data, key)
        if value is not UNSET:
            setattr(asset, attr, optional_text(value, key))
    db.session.flush()
    return asset


def delete_asset(project_id: str, asset_id: str) -> None:
    db.session.delete(get_scoped(Asset, asset_id, project_id=project_id))
