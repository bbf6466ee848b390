"""
Lead repository - stores shopping requests and their dealer conversations.

Two interchangeable backing stores share one interface:
  - InMemoryLeadRepository: process-local dict, for development and tests
  - SqlLeadRepository:      SQLAlchemy session over the leads tables

Both return LeadRecord snapshots; mutating a returned record never changes
what is stored.
"""

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from lotshoppr.database import models

LeadStatus = Literal["new", "negotiating", "won", "lost"]
UPDATABLE_FIELDS = {"status", "first_name", "last_name", "email", "zip_code"}


class LeadNotFoundError(Exception):
    """Raised when a lead id does not exist."""
    pass


# --- Records ---

class VehicleSpec(BaseModel):
    year: int = Field(..., ge=1900, le=2100)
    make: str = Field(..., min_length=1, max_length=50)
    model: str = Field(..., min_length=1, max_length=100)
    trim: str | None = Field(None, max_length=100)
    drivetrain: str | None = Field(None, max_length=20)
    color: str | None = Field(None, max_length=50)
    interior: Literal["light", "dark", "any"] = "any"


class LeaseConstraints(BaseModel):
    max_payment: float | None = Field(None, ge=0, le=20000)
    months: int | None = Field(None, ge=6, le=120)
    miles_per_year: int | None = Field(None, ge=0, le=100000)
    down_payment: float | None = Field(None, ge=0, le=500000)


class FinanceConstraints(BaseModel):
    max_payment: float | None = Field(None, ge=0, le=20000)
    months: int | None = Field(None, ge=6, le=120)
    down_payment: float | None = Field(None, ge=0, le=500000)


class LeadConstraints(BaseModel):
    deal_type: Literal["cash", "lease", "finance"] = "cash"
    target_price: float = Field(..., gt=0, le=1000000)
    max_price: float = Field(..., gt=0, le=1000000)
    tolerance_above_target: float = Field(0, ge=0, le=100000)
    must_haves: list[str] = Field(default_factory=list)
    dealbreakers: list[str] = Field(default_factory=list)
    timeline_description: str = Field("the next couple of weeks", max_length=200)
    lease: LeaseConstraints | None = None
    finance: FinanceConstraints | None = None

    @model_validator(mode="after")
    def check_price_range(self):
        if self.target_price > self.max_price:
            raise ValueError("target_price must be <= max_price")
        return self


class LeadCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    zip_code: str | None = Field(None, max_length=10)
    vehicle: VehicleSpec
    constraints: LeadConstraints


class ConversationRecord(BaseModel):
    sender: Literal["dealer", "customer", "system"]
    text: str
    subject: str | None = None
    dealer_id: str | None = None
    decision: str | None = None
    at: datetime = Field(default_factory=datetime.utcnow)


class LeadRecord(LeadCreate):
    id: str
    status: LeadStatus = "new"
    created_at: datetime
    conversation: list[ConversationRecord] = Field(default_factory=list)

    @property
    def customer_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


# --- Interface ---

class LeadRepository(ABC):
    """Create/get/update/append access to leads keyed by lead id."""

    @abstractmethod
    def create(self, data: LeadCreate) -> LeadRecord: ...

    @abstractmethod
    def get(self, lead_id: str) -> LeadRecord | None: ...

    @abstractmethod
    def update(self, lead_id: str, **changes) -> LeadRecord | None: ...

    @abstractmethod
    def append_conversation(self, lead_id: str, entry: ConversationRecord) -> LeadRecord | None: ...

    @abstractmethod
    def list_all(self) -> list[LeadRecord]: ...

    def require(self, lead_id: str) -> LeadRecord:
        lead = self.get(lead_id)
        if lead is None:
            raise LeadNotFoundError(lead_id)
        return lead


def _new_lead_id() -> str:
    return uuid.uuid4().hex


def _check_changes(changes: dict) -> None:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update lead fields: {', '.join(sorted(unknown))}")


# --- In-memory store ---

class InMemoryLeadRepository(LeadRepository):

    def __init__(self) -> None:
        self._leads: dict[str, LeadRecord] = {}

    def create(self, data: LeadCreate) -> LeadRecord:
        lead = LeadRecord(
            **data.model_dump(),
            id=_new_lead_id(),
            created_at=datetime.utcnow(),
        )
        self._leads[lead.id] = lead
        return lead.model_copy(deep=True)

    def get(self, lead_id: str) -> LeadRecord | None:
        lead = self._leads.get(lead_id)
        return lead.model_copy(deep=True) if lead else None

    def update(self, lead_id: str, **changes) -> LeadRecord | None:
        _check_changes(changes)
        existing = self._leads.get(lead_id)
        if existing is None:
            return None
        updated = LeadRecord.model_validate({**existing.model_dump(), **changes})
        self._leads[lead_id] = updated
        return updated.model_copy(deep=True)

    def append_conversation(self, lead_id: str, entry: ConversationRecord) -> LeadRecord | None:
        existing = self._leads.get(lead_id)
        if existing is None:
            return None
        existing.conversation.append(entry.model_copy())
        return existing.model_copy(deep=True)

    def list_all(self) -> list[LeadRecord]:
        return [lead.model_copy(deep=True) for lead in self._leads.values()]


# --- SQL store ---

class SqlLeadRepository(LeadRepository):

    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, data: LeadCreate) -> LeadRecord:
        vehicle = data.vehicle
        constraints = data.constraints
        lead = models.Lead(
            id=_new_lead_id(),
            status="new",
            created_at=datetime.utcnow(),
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            zip_code=data.zip_code,
            year=vehicle.year,
            make=vehicle.make,
            model=vehicle.model,
            trim=vehicle.trim,
            drivetrain=vehicle.drivetrain,
            color=vehicle.color,
            interior=vehicle.interior,
            must_haves=list(constraints.must_haves),
            dealbreakers=list(constraints.dealbreakers),
            target_price=constraints.target_price,
            max_price=constraints.max_price,
            tolerance_above_target=constraints.tolerance_above_target,
            timeline_description=constraints.timeline_description,
            deal_type=constraints.deal_type,
            lease_terms=constraints.lease.model_dump() if constraints.lease else None,
            finance_terms=constraints.finance.model_dump() if constraints.finance else None,
        )
        self.db.add(lead)
        self.db.commit()
        self.db.refresh(lead)
        return _to_record(lead)

    def get(self, lead_id: str) -> LeadRecord | None:
        lead = self.db.get(models.Lead, lead_id)
        return _to_record(lead) if lead else None

    def update(self, lead_id: str, **changes) -> LeadRecord | None:
        _check_changes(changes)
        lead = self.db.get(models.Lead, lead_id)
        if lead is None:
            return None
        for key, value in changes.items():
            setattr(lead, key, value)
        self.db.commit()
        self.db.refresh(lead)
        return _to_record(lead)

    def append_conversation(self, lead_id: str, entry: ConversationRecord) -> LeadRecord | None:
        lead = self.db.get(models.Lead, lead_id)
        if lead is None:
            return None
        lead.conversation.append(models.ConversationEntry(
            sender=entry.sender,
            dealer_id=entry.dealer_id,
            subject=entry.subject,
            text=entry.text,
            decision=entry.decision,
            at=entry.at,
        ))
        self.db.commit()
        self.db.refresh(lead)
        return _to_record(lead)

    def list_all(self) -> list[LeadRecord]:
        leads = self.db.query(models.Lead).order_by(models.Lead.created_at).all()
        return [_to_record(lead) for lead in leads]


def _to_record(lead: models.Lead) -> LeadRecord:
    """Convert a Lead ORM object to a detached LeadRecord."""
    return LeadRecord(
        id=lead.id,
        status=lead.status,
        created_at=lead.created_at,
        first_name=lead.first_name,
        last_name=lead.last_name,
        email=lead.email,
        zip_code=lead.zip_code,
        vehicle=VehicleSpec(
            year=lead.year,
            make=lead.make,
            model=lead.model,
            trim=lead.trim,
            drivetrain=lead.drivetrain,
            color=lead.color,
            interior=lead.interior or "any",
        ),
        constraints=LeadConstraints(
            deal_type=lead.deal_type or "cash",
            target_price=lead.target_price,
            max_price=lead.max_price,
            tolerance_above_target=lead.tolerance_above_target or 0,
            must_haves=list(lead.must_haves or []),
            dealbreakers=list(lead.dealbreakers or []),
            timeline_description=lead.timeline_description or "the next couple of weeks",
            lease=LeaseConstraints(**lead.lease_terms) if lead.lease_terms else None,
            finance=FinanceConstraints(**lead.finance_terms) if lead.finance_terms else None,
        ),
        conversation=[
            ConversationRecord(
                sender=entry.sender,
                text=entry.text,
                subject=entry.subject,
                dealer_id=entry.dealer_id,
                decision=entry.decision,
                at=entry.at,
            )
            for entry in lead.conversation
        ],
    )
