"""ProductRegistry use-cases."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..domain_errors import InvalidInput, NotFound
from ..models import Product
from ..services.events import PRODUCT_REGISTERED, now_utc, record_event
from ..services.roles import REGISTER_PRODUCT_ROLES
from .role_manager import require_any_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductRecord:
    """Product view; unknown ids yield ``exists=False`` instead of an error."""

    id: int
    name: str
    category: str
    manufacturer: str | None
    registered_at: datetime | None
    exists: bool

    @classmethod
    def missing(cls, product_id: int) -> "ProductRecord":
        return cls(id=product_id, name="", category="", manufacturer=None, registered_at=None, exists=False)

    @classmethod
    def from_model(cls, product: Product) -> "ProductRecord":
        return cls(
            id=product.id,
            name=product.name,
            category=product.category,
            manufacturer=product.manufacturer,
            registered_at=product.registered_at,
            exists=True,
        )


def _required_text(value: str | None, *, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(f"{field} must not be empty", details={"field": field})
    return text


def require_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        raise NotFound(f"Product {product_id} not found", details={"productId": product_id})
    return product


def register_product_use_case(
    *,
    db: Session,
    name: str,
    category: str,
    caller: str,
    at: datetime | None = None,
) -> int:
    """Register product and return its id (dense, starting at 1)."""
    manufacturer = require_any_role(db, caller=caller, allowed=REGISTER_PRODUCT_ROLES, action="registerProduct")
    clean_name = _required_text(name, field="name")
    clean_category = _required_text(category, field="category")

    product = Product(
        name=clean_name,
        category=clean_category,
        manufacturer=manufacturer,
        registered_at=at or now_utc(),
    )
    db.add(product)
    db.flush()

    record_event(
        db,
        action=PRODUCT_REGISTERED,
        actor=manufacturer,
        product_id=product.id,
        details={"name": clean_name, "category": clean_category},
        at=at,
    )
    db.commit()
    logger.info("Registered product %s (%s) by %s", product.id, clean_name, manufacturer)
    return product.id


def get_product(db: Session, product_id: int) -> ProductRecord:
    product = db.query(Product).filter(Product.id == product_id).first()
    if product is None:
        return ProductRecord.missing(product_id)
    return ProductRecord.from_model(product)


def get_product_count(db: Session) -> int:
    return int(db.query(func.count(Product.id)).scalar() or 0)


def list_existing_ids(db: Session) -> list[int]:
    """Authoritative ascending id list (no probing by id)."""
    return [row[0] for row in db.query(Product.id).order_by(Product.id.asc()).all()]


def get_all_product_ids(db: Session) -> list[int]:
    return list_existing_ids(db)


def list_products(db: Session, *, offset: int = 0, limit: int = 100) -> list[ProductRecord]:
    products = db.query(Product).order_by(Product.id.asc()).offset(offset).limit(limit).all()
    return [ProductRecord.from_model(product) for product in products]
