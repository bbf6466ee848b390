"""
Value types shared by the offer evaluator, the message composer and the
service layer.

Criteria and Offer are frozen once built. Absent fields are None and mean
"not stated": the evaluator never compares against them.

Evaluation is a small tagged union. Each variant carries only the data that
makes sense for its decision, so an accept can never carry a dealbreaker and
only a price counter carries a counter price.
"""

from dataclasses import dataclass, field, asdict
from typing import ClassVar, Union

DEAL_TYPES = ("cash", "lease", "finance")
INTERIOR_PREFERENCES = ("light", "dark", "any")
CONDITIONS = ("new", "used", "cpo", "unknown")
PRICE_TYPES = ("otd", "before_tax_fees", "unknown")


@dataclass(frozen=True)
class LeaseTerms:
    max_payment: float | None = None
    months: int | None = None
    miles_per_year: int | None = None
    down_payment: float | None = None


@dataclass(frozen=True)
class FinanceTerms:
    max_payment: float | None = None
    months: int | None = None
    down_payment: float | None = None


@dataclass(frozen=True)
class Criteria:
    """A shopper's fixed requirements for one shopping request."""
    request_id: str
    customer_name: str
    customer_email: str
    zip_code: str
    year: int
    make: str
    model: str
    target_price: float  # assumed out the door
    max_price: float
    tolerance_above_target: float = 0
    timeline_description: str = "the next couple of weeks"
    trim: str | None = None
    drivetrain: str | None = None
    interior_preference: str | None = None  # light, dark, any
    must_haves: tuple[str, ...] = ()
    dealbreakers: tuple[str, ...] = ()
    deal_type: str | None = None  # cash, lease, finance
    lease: LeaseTerms | None = None
    finance: FinanceTerms | None = None

    @property
    def vehicle_description(self) -> str:
        parts = [str(self.year), self.make, self.model]
        if self.trim:
            parts.append(self.trim)
        return " ".join(parts)


@dataclass(frozen=True)
class Offer:
    """One dealer reply, as structured by the extraction service."""
    dealer_id: str
    request_id: str
    raw_text: str = ""
    year: int | None = None
    make: str | None = None
    model: str | None = None
    trim: str | None = None
    drivetrain: str | None = None
    color: str | None = None
    condition: str = "unknown"
    mileage: float | None = None
    msrp: float | None = None
    quoted_base_price: float | None = None
    doc_fee: float | None = None
    other_fees: float | None = None
    tax_estimated: float | None = None
    price_type: str = "unknown"
    must_finance_with_dealer: bool = False
    must_add_products: bool = False
    expiration_date: str | None = None
    stock_number: str | None = None
    vin: str | None = None

    @classmethod
    def unknown(cls, dealer_id: str, request_id: str, raw_text: str = "") -> "Offer":
        """An offer where nothing could be determined from the reply."""
        return cls(dealer_id=dealer_id, request_id=request_id, raw_text=raw_text or "")

    def to_dict(self) -> dict:
        return asdict(self)


class _EvaluationMixin:
    decision: ClassVar[str]
    reason: str

    def to_dict(self) -> dict:
        data = {"decision": self.decision, "reason": self.reason}
        for key, value in asdict(self).items():
            if key == "reason" or value is None:
                continue
            data[key] = list(value) if isinstance(value, tuple) else value
        return data


@dataclass(frozen=True)
class Accept(_EvaluationMixin):
    reason: str  # meets_or_beats_target, within_tolerance
    otd_estimate: float
    decision: ClassVar[str] = "accept"


@dataclass(frozen=True)
class PriceCounter(_EvaluationMixin):
    otd_estimate: float
    counter_price: float
    reason: str = field(default="above_target_but_under_max", init=False)
    decision: ClassVar[str] = "counter"


@dataclass(frozen=True)
class FeatureCounter(_EvaluationMixin):
    missing_must_haves: tuple[str, ...]
    reason: str = field(default="missing_features", init=False)
    decision: ClassVar[str] = "counter"


@dataclass(frozen=True)
class Reject(_EvaluationMixin):
    reason: str  # wrong_year, wrong_make, wrong_model, dealbreaker_feature, over_max_price
    otd_estimate: float | None = None
    dealbreaker_hit: str | None = None
    decision: ClassVar[str] = "reject"


@dataclass(frozen=True)
class Clarify(_EvaluationMixin):
    reason: str = field(default="no_price_parsed", init=False)
    decision: ClassVar[str] = "clarify"


Evaluation = Union[Accept, PriceCounter, FeatureCounter, Reject, Clarify]


@dataclass(frozen=True)
class GeneratedEmail:
    subject: str
    body: str

    def to_dict(self) -> dict:
        return {"subject": self.subject, "body": self.body}


@dataclass(frozen=True)
class Dealer:
    dealer_id: str
    name: str
    email: str
    city: str | None = None
    state: str | None = None
