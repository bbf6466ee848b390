"""Lead endpoints: intake, outreach drafting and dealer reply handling."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from lotshoppr.config.settings import get_settings
from lotshoppr.database.db import get_db
from lotshoppr.services.lead_repository import (
    InMemoryLeadRepository,
    LeadCreate,
    LeadNotFoundError,
    LeadRepository,
    SqlLeadRepository,
)
from lotshoppr.services.negotiation_service import draft_outreach, process_dealer_reply
from lotshoppr.services.offer_models import Dealer
from lotshoppr.tasks.email_tasks import send_dealer_email

logger = logging.getLogger(__name__)

lead_router = APIRouter(prefix="/leads", tags=["leads"])

_memory_repository = InMemoryLeadRepository()


def get_lead_repository(db: Session = Depends(get_db)) -> LeadRepository:
    """Dependency - the lead store selected by LEAD_STORE."""
    if get_settings().lead_store == "memory":
        return _memory_repository
    return SqlLeadRepository(db)


# --- Request/Response Models ---

class DealerRequest(BaseModel):
    dealer_id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)


class OutreachRequest(BaseModel):
    dealers: list[DealerRequest] = Field(..., min_length=1, max_length=50)
    send: bool = False


class DealerReplyRequest(BaseModel):
    dealer_id: str = Field(..., min_length=1, max_length=64)
    from_email: str | None = Field(None, max_length=255)
    subject: str | None = Field(None, max_length=500)
    text: str = Field(..., min_length=1, max_length=20000)
    send: bool = False


# --- Endpoints ---

@lead_router.get("")
def list_leads(repo: LeadRepository = Depends(get_lead_repository)):
    """List every stored lead."""
    return {"leads": [lead.model_dump(mode="json") for lead in repo.list_all()]}


@lead_router.post("", status_code=201)
def create_lead(req: LeadCreate, repo: LeadRepository = Depends(get_lead_repository)):
    """Store a new shopping request."""
    lead = repo.create(req)
    logger.info("Created lead %s for %s %s", lead.id, lead.vehicle.make, lead.vehicle.model)
    return lead.model_dump(mode="json")


@lead_router.get("/{lead_id}")
def get_lead(lead_id: str, repo: LeadRepository = Depends(get_lead_repository)):
    lead = repo.get(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="lead_not_found")
    return lead.model_dump(mode="json")


@lead_router.post("/{lead_id}/outreach")
def create_outreach(
    lead_id: str,
    req: OutreachRequest,
    repo: LeadRepository = Depends(get_lead_repository),
):
    """Draft one first-contact email per dealer, optionally queueing delivery."""
    dealers = [Dealer(**d.model_dump()) for d in req.dealers]
    try:
        drafts = draft_outreach(repo, lead_id, dealers)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="lead_not_found")

    customer_email = repo.require(lead_id).email
    emails = []
    for draft in drafts:
        if req.send:
            send_dealer_email.delay(
                lead_id, draft.dealer.dealer_id, draft.dealer.email,
                draft.email.subject, draft.email.body, reply_to=customer_email,
            )
        emails.append({
            "dealer_id": draft.dealer.dealer_id,
            "to": draft.dealer.email,
            "subject": draft.email.subject,
            "body": draft.email.body,
            "queued": req.send,
        })
    return {"lead_id": lead_id, "emails": emails}


@lead_router.post("/{lead_id}/dealer-reply")
def receive_dealer_reply(
    lead_id: str,
    req: DealerReplyRequest,
    repo: LeadRepository = Depends(get_lead_repository),
):
    """Extract, evaluate and answer a dealer's reply."""
    try:
        outcome = process_dealer_reply(repo, lead_id, req.dealer_id, req.text, subject=req.subject)
    except LeadNotFoundError:
        raise HTTPException(status_code=404, detail="lead_not_found")

    if req.send and req.from_email:
        customer_email = repo.require(lead_id).email
        send_dealer_email.delay(
            lead_id, req.dealer_id, req.from_email,
            outcome.followup.subject, outcome.followup.body, reply_to=customer_email,
        )
    return outcome.to_dict()
