"""
Offer evaluator - decides what to do with a dealer's offer.

Rules run in a fixed order and the first one that fires wins:
  1. Identity (year, make, model) - only for fields the dealer stated
  2. Must-have features           - missing ones become a counter
  3. Dealbreaker features         - reject
  4. Out-the-door estimate        - clarify when no price could be read
  5. Price tiers vs target / max  - accept, counter or reject

Pure function: no I/O, no randomness, never raises for partial offers.
"""

from lotshoppr.config.feature_keywords import detect_features
from lotshoppr.services.offer_models import (
    Accept,
    Clarify,
    Criteria,
    Evaluation,
    FeatureCounter,
    Offer,
    PriceCounter,
    Reject,
)

# A counter never asks for less than this much off the dealer's number
COUNTER_STEP = 250


def evaluate(criteria: Criteria, offer: Offer) -> Evaluation:
    """Classify a dealer offer against the shopper's criteria."""
    identity = _check_identity(criteria, offer)
    if identity is not None:
        return identity

    features = detect_features(offer.raw_text)

    missing = missing_must_haves(criteria.must_haves, features)
    if missing:
        return FeatureCounter(missing_must_haves=tuple(missing))

    hit = find_dealbreaker(criteria.dealbreakers, features)
    if hit is not None:
        return Reject(reason="dealbreaker_feature", dealbreaker_hit=hit)

    otd = estimate_otd(offer)
    if otd is None:
        return Clarify()

    return _price_tier(criteria, otd)


def estimate_otd(offer: Offer) -> float | None:
    """
    Estimate the out-the-door price.

    Quoted base price (falling back to MSRP) plus doc fee, other fees and
    estimated tax, each defaulting to zero. None when there is no base at all.
    """
    base = offer.quoted_base_price if offer.quoted_base_price is not None else offer.msrp
    if base is None:
        return None
    doc = offer.doc_fee if offer.doc_fee is not None else 0
    other = offer.other_fees if offer.other_fees is not None else 0
    tax = offer.tax_estimated if offer.tax_estimated is not None else 0
    return base + doc + other + tax


def missing_must_haves(must_haves, features: list[str]) -> list[str]:
    """Must-haves not contained in any detected feature, in original order."""
    return [
        m for m in must_haves
        if not any(m.lower() in f for f in features)
    ]


def find_dealbreaker(dealbreakers, features: list[str]) -> str | None:
    """First dealbreaker contained in a detected feature, as the shopper wrote it."""
    for d in dealbreakers:
        if any(d.lower() in f for f in features):
            return d
    return None


def counter_price_for(target: float, otd: float) -> float:
    """The more aggressive of our target and the dealer's number minus a step."""
    return min(target, otd - COUNTER_STEP)


def _check_identity(criteria: Criteria, offer: Offer) -> Reject | None:
    if offer.year and offer.year != criteria.year:
        return Reject(reason="wrong_year")
    if offer.make and offer.make.lower() != criteria.make.lower():
        return Reject(reason="wrong_make")
    if offer.model and offer.model.lower() != criteria.model.lower():
        return Reject(reason="wrong_model")
    return None


def _price_tier(criteria: Criteria, otd: float) -> Evaluation:
    target = criteria.target_price
    max_price = criteria.max_price
    tolerance = criteria.tolerance_above_target

    if otd <= target:
        return Accept(reason="meets_or_beats_target", otd_estimate=otd)
    if otd <= target + tolerance and otd <= max_price:
        return Accept(reason="within_tolerance", otd_estimate=otd)
    if otd <= max_price:
        return PriceCounter(otd_estimate=otd, counter_price=counter_price_for(target, otd))
    return Reject(reason="over_max_price", otd_estimate=otd)
