"""
Negotiation service - runs a lead through outreach and dealer replies.

Glue between the lead repository and the pure pieces: it turns a stored lead
into Criteria, drafts one outreach email per dealer, and for each dealer reply
extracts the offer, evaluates it, drafts the follow-up, logs both messages
on the lead's conversation and moves the lead's status along.
"""

import logging
import random
from dataclasses import dataclass

from lotshoppr.services.lead_repository import (
    ConversationRecord,
    LeadConstraints,
    LeadRecord,
    LeadRepository,
    VehicleSpec,
)
from lotshoppr.services.message_composer import compose_followup, compose_outreach
from lotshoppr.services.offer_evaluator import evaluate
from lotshoppr.services.offer_extraction import extract_offer
from lotshoppr.services.offer_models import (
    Criteria,
    Dealer,
    Evaluation,
    FinanceTerms,
    GeneratedEmail,
    LeaseTerms,
    Offer,
)

logger = logging.getLogger(__name__)

# Lead status after a dealer reply, by decision
STATUS_AFTER_DECISION = {
    "accept": "won",
    "counter": "negotiating",
    "clarify": "negotiating",
    "reject": "negotiating",
}


@dataclass(frozen=True)
class OutreachDraft:
    dealer: Dealer
    email: GeneratedEmail


@dataclass(frozen=True)
class ReplyOutcome:
    offer: Offer
    evaluation: Evaluation
    followup: GeneratedEmail

    def to_dict(self) -> dict:
        return {
            "evaluation": self.evaluation.to_dict(),
            "offer": self.offer.to_dict(),
            "followup_email": self.followup.to_dict(),
        }


def criteria_for_lead(lead: LeadRecord) -> Criteria:
    """Build the evaluator's Criteria from a stored lead."""
    return build_criteria(
        request_id=lead.id,
        customer_name=lead.customer_name,
        customer_email=lead.email,
        zip_code=lead.zip_code,
        vehicle=lead.vehicle,
        constraints=lead.constraints,
    )


def build_criteria(
    request_id: str,
    customer_name: str,
    customer_email: str,
    zip_code: str | None,
    vehicle: VehicleSpec,
    constraints: LeadConstraints,
) -> Criteria:
    lease = constraints.lease
    finance = constraints.finance
    return Criteria(
        request_id=request_id,
        customer_name=customer_name,
        customer_email=customer_email,
        zip_code=zip_code or "",
        year=vehicle.year,
        make=vehicle.make,
        model=vehicle.model,
        trim=vehicle.trim,
        drivetrain=vehicle.drivetrain,
        interior_preference=vehicle.interior,
        must_haves=tuple(constraints.must_haves),
        dealbreakers=tuple(constraints.dealbreakers),
        target_price=constraints.target_price,
        max_price=constraints.max_price,
        tolerance_above_target=constraints.tolerance_above_target,
        timeline_description=constraints.timeline_description,
        deal_type=constraints.deal_type,
        lease=LeaseTerms(**lease.model_dump()) if lease else None,
        finance=FinanceTerms(**finance.model_dump()) if finance else None,
    )


def draft_outreach(
    repo: LeadRepository,
    lead_id: str,
    dealers: list[Dealer],
    rng: random.Random | None = None,
) -> list[OutreachDraft]:
    """
    Draft a first-contact email for each dealer and log it on the lead.

    Each dealer gets an independently varied email so the same inquiry does
    not land in several inboxes word for word.
    """
    lead = repo.require(lead_id)
    criteria = criteria_for_lead(lead)

    drafts = []
    for dealer in dealers:
        email = compose_outreach(criteria, rng=rng)
        repo.append_conversation(lead_id, ConversationRecord(
            sender="customer",
            dealer_id=dealer.dealer_id,
            subject=email.subject,
            text=email.body,
        ))
        drafts.append(OutreachDraft(dealer=dealer, email=email))

    if dealers and lead.status == "new":
        repo.update(lead_id, status="negotiating")

    logger.info("Drafted outreach for lead %s to %d dealers", lead_id, len(drafts))
    return drafts


def process_dealer_reply(
    repo: LeadRepository,
    lead_id: str,
    dealer_id: str,
    text: str,
    subject: str | None = None,
    rng: random.Random | None = None,
    extractor=extract_offer,
) -> ReplyOutcome:
    """Extract, evaluate and answer one dealer reply."""
    lead = repo.require(lead_id)
    criteria = criteria_for_lead(lead)

    offer = extractor(dealer_id, lead_id, text)
    evaluation = evaluate(criteria, offer)
    followup = compose_followup(criteria, offer, evaluation, rng=rng)

    repo.append_conversation(lead_id, ConversationRecord(
        sender="dealer",
        dealer_id=dealer_id,
        subject=subject,
        text=text,
        decision=evaluation.decision,
    ))
    repo.append_conversation(lead_id, ConversationRecord(
        sender="customer",
        dealer_id=dealer_id,
        subject=followup.subject,
        text=followup.body,
    ))

    new_status = STATUS_AFTER_DECISION[evaluation.decision]
    # A won lead stays won; later dealers only get a reply
    if lead.status != "won" and new_status != lead.status:
        repo.update(lead_id, status=new_status)

    logger.info(
        "Evaluated offer from dealer %s for lead %s: %s (%s)",
        dealer_id, lead_id, evaluation.decision, evaluation.reason,
    )
    return ReplyOutcome(offer=offer, evaluation=evaluation, followup=followup)
