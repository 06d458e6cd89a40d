"""SQLAlchemy models for the four ledger components and the event log."""
from sqlalchemy import (
    Boolean, CheckConstraint, Column, ForeignKey, Index, Integer,
    JSON, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base, UTCDateTime


class RoleGrant(Base):
    """One role held by one identity (RoleManager state)."""
    __tablename__ = "role_grants"

    id = Column(Integer, primary_key=True)
    identity = Column(String(128), nullable=False, index=True)
    role = Column(String(32), nullable=False)
    granted_by = Column(String(128), nullable=True)
    granted_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("identity", "role", name="uq_role_grant_identity_role"),
        CheckConstraint(
            role.in_(["ADMIN", "MANUFACTURER", "DISTRIBUTOR", "RETAILER", "QUALITY_INSPECTOR"]),
            name="chk_role_grant_role",
        ),
    )


class Product(Base):
    """Registered product (ProductRegistry state)."""
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(255), nullable=False)
    manufacturer = Column(String(128), nullable=False, index=True)
    registered_at = Column(UTCDateTime, nullable=False)

    # AUTOINCREMENT: ids of removed rows are never handed out again.
    __table_args__ = {"sqlite_autoincrement": True}

    steps = relationship("SupplyStep", back_populates="product", order_by="SupplyStep.position")
    reports = relationship("QualityReport", back_populates="product", order_by="QualityReport.id")


class SupplyStep(Base):
    """Append-only tracking step (SupplyChain state)."""
    __tablename__ = "supply_steps"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    position = Column(Integer, nullable=False)
    stage = Column(Integer, nullable=False)
    location = Column(String(255), nullable=False)
    actor = Column(String(128), nullable=False)
    timestamp = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        UniqueConstraint("product_id", "position", name="uq_supply_step_position"),
        CheckConstraint("stage >= 0 AND stage <= 3", name="chk_supply_step_stage"),
    )

    product = relationship("Product", back_populates="steps")


class QualityReport(Base):
    """Append-only inspection report (QualityControl state)."""
    __tablename__ = "quality_reports"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    inspector = Column(String(128), nullable=False)
    passed = Column(Boolean, nullable=False)
    comments = Column(Text, nullable=False, default="")
    timestamp = Column(UTCDateTime, nullable=False)

    product = relationship("Product", back_populates="reports")


class QualityCounters(Base):
    """Running report counters, written only by the add-report use case."""
    __tablename__ = "quality_counters"

    id = Column(Integer, primary_key=True)
    total_reports = Column(Integer, nullable=False, default=0)
    passed_reports = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "total_reports >= passed_reports AND passed_reports >= 0",
            name="chk_quality_counters_bounds",
        ),
    )


class LedgerEvent(Base):
    """Event log entry emitted by every committed mutation."""
    __tablename__ = "ledger_events"

    id = Column(Integer, primary_key=True)
    action = Column(String(50), nullable=False, index=True)
    actor = Column(String(128), nullable=False)
    product_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(UTCDateTime, nullable=False)

    __table_args__ = (
        Index("idx_ledger_events_product", "product_id", "id"),
    )
