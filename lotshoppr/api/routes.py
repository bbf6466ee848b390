from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from lotshoppr.services.lead_repository import LeadConstraints, VehicleSpec
from lotshoppr.services.message_composer import compose_followup
from lotshoppr.services.negotiation_service import build_criteria
from lotshoppr.services.offer_evaluator import evaluate
from lotshoppr.services.offer_models import Offer

router = APIRouter()


# --- Request/Response Models ---

class OfferRequest(BaseModel):
    dealer_id: str = Field("manual", min_length=1, max_length=64)
    raw_text: str = Field("", max_length=20000)
    year: int | None = Field(None, ge=1900, le=2100)
    make: str | None = Field(None, max_length=50)
    model: str | None = Field(None, max_length=100)
    trim: str | None = Field(None, max_length=100)
    drivetrain: str | None = Field(None, max_length=20)
    color: str | None = Field(None, max_length=50)
    condition: Literal["new", "used", "cpo", "unknown"] = "unknown"
    mileage: float | None = Field(None, ge=0)
    msrp: float | None = Field(None, ge=0, le=1000000)
    quoted_base_price: float | None = Field(None, ge=0, le=1000000)
    doc_fee: float | None = Field(None, ge=0, le=100000)
    other_fees: float | None = Field(None, ge=0, le=100000)
    tax_estimated: float | None = Field(None, ge=0, le=200000)
    price_type: Literal["otd", "before_tax_fees", "unknown"] = "unknown"
    must_finance_with_dealer: bool = False
    must_add_products: bool = False
    expiration_date: str | None = Field(None, max_length=50)
    stock_number: str | None = Field(None, max_length=50)
    vin: str | None = Field(None, max_length=17)


class EvaluateRequest(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_email: str = Field("", max_length=255)
    zip_code: str | None = Field(None, max_length=10)
    vehicle: VehicleSpec
    constraints: LeadConstraints
    offer: OfferRequest


# --- Endpoints ---

@router.get("/health")
def health_check():
    return {"status": "ok", "service": "lotshoppr", "version": "0.1.0"}


@router.post("/evaluate")
def evaluate_offer(req: EvaluateRequest):
    """Evaluate an already-structured offer and draft the follow-up, without storing anything."""
    criteria = build_criteria(
        request_id="adhoc",
        customer_name=req.customer_name,
        customer_email=req.customer_email,
        zip_code=req.zip_code,
        vehicle=req.vehicle,
        constraints=req.constraints,
    )
    offer = Offer(request_id=criteria.request_id, **req.offer.model_dump())
    evaluation = evaluate(criteria, offer)
    followup = compose_followup(criteria, offer, evaluation)
    return {
        "evaluation": evaluation.to_dict(),
        "followup_email": followup.to_dict(),
    }
