from datetime import datetime
from typing import Any, Dict, Optional

from .constants import FACTORY_CATEGORIES
from .extensions import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Category(TimestampMixin, db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    image = db.Column(db.String(500))
    parent_id = db.Column(db.Integer, db.ForeignKey("categories.id"))
    enabled = db.Column(db.Boolean, nullable=False, default=True)

    parent = db.relationship("Category", remote_side=[id], backref="children")

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the record shape consumed by the hierarchy helpers."""

        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "parentId": self.parent_id,
            "parentName": self.parent.name if self.parent else None,
            "enabled": bool(self.enabled),
            "creationTime": self.created_at.isoformat() if self.created_at else None,
        }


def find_category_by_name(name: str) -> Optional[Category]:
    return Category.query.filter(db.func.lower(Category.name) == name.lower()).first()


def seed_categories(commit: bool = True) -> int:
    """Insert the factory category set and return how many were created.

    With ``commit=False`` the rows are only flushed and the caller owns the
    transaction.
    """

    created: Dict[str, Category] = {}
    for item in FACTORY_CATEGORIES:
        parent = created.get(item["parent"]) if item["parent"] else None
        category = Category(name=item["name"], parent=parent, enabled=True)
        db.session.add(category)
        created[item["name"]] = category
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return len(FACTORY_CATEGORIES)


def ensure_seed_data() -> None:
    if Category.query.first() is None:
        seed_categories()
