"""
Offer extraction service - turns a dealer's free-text reply into an Offer.

Uses an OpenAI chat completion in JSON mode. The model is asked for a flat
JSON object; every value is then coerced leniently, so a bad field becomes
"unknown" instead of failing the whole reply.

Never raises. No API key, repeated upstream failures or an unusable response
all produce an all-unknown Offer carrying the raw text, which the evaluator
answers with a request for a price breakdown.
"""

import json
import logging
import math
import re
from functools import lru_cache

from openai import OpenAI, APIConnectionError, APITimeoutError, InternalServerError, RateLimitError
from pydantic import BaseModel, field_validator
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from lotshoppr.config.settings import get_settings
from lotshoppr.services.offer_models import CONDITIONS, PRICE_TYPES, Offer

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You extract structured car purchase offers from dealer emails.
Return strict JSON only, with exactly these keys:

{
  "year": number | null,
  "make": string | null,
  "model": string | null,
  "trim": string | null,
  "drivetrain": string | null,
  "color": string | null,
  "condition": "new" | "used" | "cpo" | "unknown",
  "mileage": number | null,
  "msrp": number | null,
  "quoted_base_price": number | null,
  "doc_fee": number | null,
  "other_fees": number | null,
  "tax_estimated": number | null,
  "price_type": "otd" | "before_tax_fees" | "unknown",
  "must_finance_with_dealer": boolean,
  "must_add_products": boolean,
  "expiration_date": string | null,
  "stock_number": string | null,
  "vin": string | null
}"""

USER_PROMPT = "Dealer email:\n\n{text}\n\nExtract the values. Use null for anything not stated."

_NUMBER_JUNK = re.compile(r"[$,\s]")

_TRANSIENT_ERRORS = (APITimeoutError, APIConnectionError, RateLimitError, InternalServerError)


class ExtractedOffer(BaseModel):
    """The model's answer, coerced field by field. Never fails validation."""
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

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value):
        number = _to_number(value)
        if number is None or not 1900 <= number <= 2100:
            return None
        return int(number)

    @field_validator(
        "mileage", "msrp", "quoted_base_price", "doc_fee", "other_fees", "tax_estimated",
        mode="before",
    )
    @classmethod
    def coerce_amount(cls, value):
        return _to_number(value)

    @field_validator(
        "make", "model", "trim", "drivetrain", "color", "expiration_date", "stock_number", "vin",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value):
        if value is None or isinstance(value, (dict, list, bool)):
            return None
        text = str(value).strip()
        return text or None

    @field_validator("condition", mode="before")
    @classmethod
    def coerce_condition(cls, value):
        return _to_choice(value, CONDITIONS)

    @field_validator("price_type", mode="before")
    @classmethod
    def coerce_price_type(cls, value):
        return _to_choice(value, PRICE_TYPES)

    @field_validator("must_finance_with_dealer", "must_add_products", mode="before")
    @classmethod
    def coerce_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)


def extract_offer(dealer_id: str, request_id: str, raw_text: str, client=None) -> Offer:
    """Structure a dealer reply. Falls back to an all-unknown Offer on any failure."""
    if not raw_text or not raw_text.strip():
        return Offer.unknown(dealer_id, request_id, raw_text)

    settings = get_settings()
    client = client or _get_client()
    if client is None:
        logger.warning("No OpenAI client configured; offer from dealer %s left unparsed", dealer_id)
        return Offer.unknown(dealer_id, request_id, raw_text)

    try:
        payload = _request_extraction(client, settings.openai_model, raw_text)
    except Exception:
        logger.warning(
            "Offer extraction failed for dealer %s (request %s) - using unknown offer",
            dealer_id, request_id, exc_info=True,
        )
        return Offer.unknown(dealer_id, request_id, raw_text)

    return offer_from_payload(dealer_id, request_id, raw_text, payload)


def offer_from_payload(dealer_id: str, request_id: str, raw_text: str, payload) -> Offer:
    """Build an Offer from a decoded JSON payload, ignoring unusable values."""
    if not isinstance(payload, dict):
        payload = {}
    known = {k: v for k, v in payload.items() if k in ExtractedOffer.model_fields}
    extracted = ExtractedOffer.model_validate(known)
    return Offer(
        dealer_id=dealer_id,
        request_id=request_id,
        raw_text=raw_text,
        **extracted.model_dump(),
    )


@lru_cache(maxsize=1)
def _get_client():
    settings = get_settings()
    if not settings.openai_api_key:
        return None
    # Retries are handled by tenacity below
    return OpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
        max_retries=0,
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(_TRANSIENT_ERRORS),
    reraise=True,
)
def _request_extraction(client, model: str, raw_text: str) -> dict:
    """Ask the model for the offer JSON. Retries transient API errors."""
    completion = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": USER_PROMPT.format(text=raw_text)},
        ],
        temperature=0,
        response_format={"type": "json_object"},
    )
    content = completion.choices[0].message.content or "{}"
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        logger.warning("Offer extraction returned non-JSON content; treating as empty")
        return {}


def _to_number(value) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(_NUMBER_JUNK.sub("", value))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_choice(value, choices: tuple[str, ...]) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return "unknown"
