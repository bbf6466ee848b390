"""
Message composer - builds dealer emails from criteria and evaluations.

The narrative skeleton of every email is fixed; only the connective wording
of each slot is drawn from the banks in config/phrase_banks.py. Prices,
the vehicle description and the decision itself are never randomized.

Pass a seeded random.Random as ``rng`` for reproducible output.
"""

import random
from typing import Sequence, TypeVar

from lotshoppr.config import phrase_banks as banks
from lotshoppr.services.offer_models import (
    Accept,
    Clarify,
    Criteria,
    Evaluation,
    GeneratedEmail,
    Offer,
    PriceCounter,
)

T = TypeVar("T")

DEFAULT_LEASE_MONTHS = 36
DEFAULT_LEASE_MILES = 10000
DEFAULT_FINANCE_MONTHS = 60


def pick(bank: Sequence[T], rng: random.Random) -> T:
    """Choose one variant uniformly."""
    return bank[rng.randrange(len(bank))]


def format_money(amount: float) -> str:
    """$29,700 for whole dollars, $29,700.50 otherwise. Negatives read -$100."""
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if float(amount).is_integer():
        return f"{sign}${amount:,.0f}"
    return f"{sign}${amount:,.2f}"


def compose_outreach(criteria: Criteria, rng: random.Random | None = None) -> GeneratedEmail:
    """Draft the first inquiry a shopper sends to a dealer."""
    rng = rng or random.Random()
    deal_type = _deal_type(criteria)
    vehicle = f"{criteria.year} {criteria.make} {criteria.model}"

    subject = pick(banks.OUTREACH_SUBJECTS[deal_type], rng).format(
        vehicle=vehicle, zip_code=criteria.zip_code,
    )

    body = (
        pick(banks.OUTREACH_INTROS, rng).format(
            name=criteria.customer_name,
            zip_code=criteria.zip_code,
            vehicle_full=_full_vehicle(criteria),
        )
        + _interior_sentence(criteria, rng)
        + _list_sentence(banks.MUST_HAVE_SENTENCES, criteria.must_haves, rng)
        + _list_sentence(banks.DEALBREAKER_SENTENCES, criteria.dealbreakers, rng)
        + pick(banks.TIMELINE_SENTENCES, rng).format(timeline=criteria.timeline_description)
        + _price_paragraph(criteria, deal_type, rng)
        + pick(banks.ASK_PARAGRAPHS[deal_type], rng)
        + pick(banks.OUTREACH_SIGN_OFFS, rng).format(name=criteria.customer_name)
    )
    return GeneratedEmail(subject=subject, body=body)


def compose_followup(
    criteria: Criteria,
    offer: Offer,
    evaluation: Evaluation,
    rng: random.Random | None = None,
) -> GeneratedEmail:
    """
    Draft the reply to a dealer's offer.

    Accept, price counter and clarify each get their own email. Everything
    else - rejects and must-have counters, which carry no counter price -
    gets the polite decline that restates the shopper's target and
    must-haves, inviting the dealer to come back with a better match.
    """
    rng = rng or random.Random()
    if isinstance(evaluation, Accept):
        return _accept_email(criteria, offer, evaluation, rng)
    if isinstance(evaluation, PriceCounter):
        return _counter_email(criteria, evaluation, rng)
    if isinstance(evaluation, Clarify):
        return _clarify_email(criteria, rng)
    return _decline_email(criteria, rng)


# --- Outreach slots ---

def _deal_type(criteria: Criteria) -> str:
    if criteria.deal_type in ("lease", "finance"):
        return criteria.deal_type
    return "cash"


def _full_vehicle(criteria: Criteria) -> str:
    parts = [str(criteria.year), criteria.make, criteria.model]
    if criteria.trim:
        parts.append(criteria.trim)
    if criteria.drivetrain:
        parts.append(criteria.drivetrain)
    return " ".join(parts)


def _interior_sentence(criteria: Criteria, rng: random.Random) -> str:
    words = banks.INTERIOR_WORDS.get(criteria.interior_preference or "any")
    if not words:
        return ""
    return pick(banks.INTERIOR_SENTENCES, rng).format(interior=words)


def _list_sentence(bank: list[str], items: Sequence[str], rng: random.Random) -> str:
    if not items:
        return ""
    return pick(bank, rng).format(items=", ".join(items))


def _price_paragraph(criteria: Criteria, deal_type: str, rng: random.Random) -> str:
    template = pick(banks.PRICE_PARAGRAPHS[deal_type], rng)

    if deal_type == "lease":
        terms = criteria.lease
        payment = terms.max_payment if terms else None
        return template.format(
            payment_goal=_payment_goal(
                payment, banks.LEASE_PAYMENT_GOAL, banks.LEASE_PAYMENT_GOAL_OPEN,
            ),
            months=(terms.months if terms and terms.months else DEFAULT_LEASE_MONTHS),
            miles=f"{(terms.miles_per_year if terms and terms.miles_per_year else DEFAULT_LEASE_MILES):,}",
            down_sentence=_down_sentence(terms.down_payment if terms else None),
        )

    if deal_type == "finance":
        terms = criteria.finance
        payment = terms.max_payment if terms else None
        return template.format(
            payment_goal=_payment_goal(
                payment, banks.FINANCE_PAYMENT_GOAL, banks.FINANCE_PAYMENT_GOAL_OPEN,
            ),
            months=(terms.months if terms and terms.months else DEFAULT_FINANCE_MONTHS),
            down_sentence=_down_sentence(terms.down_payment if terms else None),
        )

    return template.format(
        target=format_money(criteria.target_price),
        max_price=format_money(criteria.max_price),
    )


def _payment_goal(payment: float | None, stated: str, open_ended: str) -> str:
    if not payment:
        return open_ended
    return stated.format(payment=format_money(payment))


def _down_sentence(down_payment: float | None) -> str:
    if down_payment:
        return banks.DOWN_PAYMENT_SENTENCE.format(down=format_money(down_payment))
    return banks.MINIMAL_DOWN_SENTENCE


# --- Follow-up branches ---

def _restated_terms(criteria: Criteria) -> str:
    target = format_money(criteria.target_price)
    if criteria.must_haves:
        return f"around {target} OTD, ideally with {', '.join(criteria.must_haves)}"
    return f"around {target} OTD"


def _accept_email(
    criteria: Criteria, offer: Offer, evaluation: Accept, rng: random.Random
) -> GeneratedEmail:
    vehicle = criteria.vehicle_description
    lines = [
        pick(banks.GREETINGS, rng),
        "",
        f"Thanks for sending the numbers on the {vehicle}.",
        "",
        f"The out-the-door figure of {format_money(evaluation.otd_estimate)} works for me "
        "and fits what I was aiming for.",
        "",
        pick(banks.ACCEPT_CHECKS, rng),
    ]
    conditions = []
    if offer.must_finance_with_dealer:
        conditions.append("financing through the dealership")
    if offer.must_add_products:
        conditions.append("the add-on products")
    if conditions:
        lines.append(
            f"I'd also need {' and '.join(conditions)} to be optional at that price."
        )
    lines += [
        "",
        pick(banks.ACCEPT_CLOSERS, rng),
        "",
        pick(banks.ACCEPT_SIGN_OFFS, rng),
        criteria.customer_name,
    ]
    subject = pick(banks.ACCEPT_SUBJECTS, rng).format(vehicle=vehicle)
    return GeneratedEmail(subject=subject, body="\n".join(lines))


def _counter_email(criteria: Criteria, evaluation: PriceCounter, rng: random.Random) -> GeneratedEmail:
    vehicle = criteria.vehicle_description
    lines = [
        pick(banks.GREETINGS, rng),
        "",
        pick(banks.COUNTER_OPENERS, rng).format(vehicle=vehicle),
        "",
        f"Your OTD figure of {format_money(evaluation.otd_estimate)} is a bit above where I'm "
        f"comfortable. Just to reiterate, I'm looking for something {_restated_terms(criteria)}.",
        "",
        f"If you're able to get closer to about {format_money(evaluation.counter_price)} OTD, "
        "I'd be ready to move forward.",
        "",
        pick(banks.NEGOTIATION_LINES, rng),
        "",
        pick(banks.COUNTER_SIGN_OFFS, rng),
        criteria.customer_name,
    ]
    subject = pick(banks.COUNTER_SUBJECTS, rng).format(vehicle=vehicle)
    return GeneratedEmail(subject=subject, body="\n".join(lines))


def _clarify_email(criteria: Criteria, rng: random.Random) -> GeneratedEmail:
    vehicle = criteria.vehicle_description
    lines = [
        pick(banks.GREETINGS, rng),
        "",
        f"Thanks for the info on the {vehicle}.",
        "",
        "I couldn't tell exactly what the total OTD price would be (with dealer fees included).",
        "",
        "Could you send a simple breakdown with the main price, dealer fees, and any required extras?",
        "",
        pick(banks.CLARIFY_CLOSERS, rng),
        "",
        pick(banks.CLARIFY_SIGN_OFFS, rng),
        criteria.customer_name,
    ]
    subject = pick(banks.CLARIFY_SUBJECTS, rng).format(vehicle=vehicle)
    return GeneratedEmail(subject=subject, body="\n".join(lines))


def _decline_email(criteria: Criteria, rng: random.Random) -> GeneratedEmail:
    vehicle = criteria.vehicle_description
    lines = [
        pick(banks.GREETINGS, rng),
        "",
        "Thanks for taking the time to send the quote.",
        "",
        pick(banks.DECLINE_LINES, rng),
        "",
        f"Just so you know, I'm really looking for something {_restated_terms(criteria)}. "
        "If you're able to get closer to that, I'd be happy to revisit.",
        "",
        pick(banks.DECLINE_SIGN_OFFS, rng),
        criteria.customer_name,
    ]
    subject = pick(banks.DECLINE_SUBJECTS, rng).format(vehicle=vehicle)
    return GeneratedEmail(subject=subject, body="\n".join(lines))
