"""Category (team) CRUD and membership service."""

import logging

from studioboard.core.exceptions import ValidationError
from studioboard.models import db
from studioboard.models.category import Category, CategoryMember
from studioboard.models.user import DEFAULT_COLOR
from studioboard.services.helpers.queries import add_link, get_or_404, remove_link, replace_links
from studioboard.utils.helpers import UNSET, optional_text, pick, require_text, string_list

logger = logging.getLogger(__name__)


def _member_row(user_id):
    return CategoryMember(user_id=user_id)


def list_categories() -> list[Category]:
    return Category.query.order_by(Category.name.asc()).all()


def get_category(category_id: str) -> Category:
    return get_or_404(Category, category_id, "Category")


def create_category(data: dict) -> Category:
    category = Category(
        name=require_text(data, "name")["name"],
        description=optional_text(data.get("description"), "description"),
        color=optional_text(data.get("color"), "color") or DEFAULT_COLOR,
    )
    replace_links(category.memberships, string_list(data.get("members"), "members"), _member_row)
    db.session.add(category)
    db.session.flush()
    logger.info("Category %s created", category.id)
    return category


def update_category(category_id: str, data: dict) -> Category:
    category = get_category(category_id)

    name = pick(data, "name")
    if name:
        category.name = optional_text(name, "name").strip() or category.name
    description = pick(data, "description")
    if description is not UNSET:
        category.description = optional_text(description, "description")
    color = pick(data, "color")
    if color:
        category.color = optional_text(color, "color")

    members = pick(data, "members")
    if members is not UNSET and members is not None:
        replace_links(category.memberships, string_list(members, "members"), _member_row)

    db.session.flush()
    return category


def delete_category(category_id: str) -> None:
    """Bugs filed under the category keep existing with categoryId = null."""
    category = get_category(category_id)
    db.session.delete(category)
    logger.info("Category %s deleted", category_id)


def add_member(category_id: str, user_id) -> bool:
    if not user_id:
        raise ValidationError("userId required")
    category = get_category(category_id)
    return add_link(category.memberships, optional_text(user_id, "userId"), _member_row)


def remove_member(category_id: str, user_id: str) -> bool:
    category = get_category(category_id)
    return remove_link(category.memberships, user_id)
