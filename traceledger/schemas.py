"""Pydantic schemas for API."""
from pydantic import BaseModel, Field, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

from .services.stages import Stage


# Auth schemas
class TokenRequest(BaseModel):
    identity: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    identity: str


class IdentityResponse(BaseModel):
    identity: str
    roles: list[str]
    capabilities: dict[str, bool]


# Role schemas
class RoleChangeRequest(BaseModel):
    role: str
    identity: str


class RoleChangeResponse(BaseModel):
    role: str
    identity: str
    changed: bool


class HasRoleResponse(BaseModel):
    identity: str
    role: str
    has_role: bool


class RoleMemberOut(BaseModel):
    identity: str
    roles: list[str]


class RoleDirectoryResponse(BaseModel):
    user_count: int
    members: list[RoleMemberOut]


# Product schemas
class ProductCreate(BaseModel):
    name: str = Field(..., max_length=255)
    category: str = Field(..., max_length=255)


class ProductCreated(BaseModel):
    id: int


class ProductOut(BaseModel):
    id: int
    name: str
    category: str
    manufacturer: Optional[str] = None
    registered_at: Optional[datetime] = None
    exists: bool
    model_config = ConfigDict(from_attributes=True)


class ProductCountResponse(BaseModel):
    count: int


# Supply chain schemas
class StepCreate(BaseModel):
    stage: int | str
    location: str = Field(..., max_length=255)


class StepOut(BaseModel):
    position: int
    stage: int
    stage_label: str
    location: str
    actor: str
    timestamp: datetime

    @classmethod
    def from_model(cls, step) -> "StepOut":
        stage = Stage(step.stage)
        return cls(
            position=step.position,
            stage=int(stage),
            stage_label=stage.label,
            location=step.location,
            actor=step.actor,
            timestamp=step.timestamp,
        )


class StepListResponse(BaseModel):
    product_id: int
    count: int
    steps: list[StepOut]


# Quality schemas
class ReportCreate(BaseModel):
    passed: bool
    comments: str = ""


class ReportOut(BaseModel):
    id: int
    product_id: int
    inspector: str
    passed: bool
    comments: str
    timestamp: datetime
    model_config = ConfigDict(from_attributes=True)


class QualityStatsResponse(BaseModel):
    total_reports: int
    passed_reports: int
    failed_reports: int
    pass_rate: int


# Aggregation schemas
class EventOut(BaseModel):
    id: int
    action: str
    actor: str
    product_id: Optional[int] = None
    details: dict = Field(default_factory=dict)
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)

    @field_validator("details", mode="before")
    @classmethod
    def _details_default(cls, value):
        return value or {}


class DashboardSummaryOut(BaseModel):
    total_products: int
    total_steps: int
    total_reports: int
    passed_reports: int
    failed_reports: int
    pass_rate: int
    total_users: int
    awaiting_inspection: int
    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    summary: DashboardSummaryOut
    recent_activity: list[EventOut]


class ProductTraceResponse(BaseModel):
    product: ProductOut
    current_stage: Optional[str] = None
    steps: list[StepOut]
    reports: list[ReportOut]
    out_of_order_positions: list[int] = Field(default_factory=list)


# Deployment schemas
class ContractAddresses(BaseModel):
    RoleManager: str
    ProductRegistry: str
    SupplyChain: str
    QualityControl: str


class DeploymentInfo(BaseModel):
    network: str
    chainId: int
    deployer: str
    timestamp: str
    contracts: ContractAddresses
