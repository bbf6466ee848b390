"""Tests for the offer evaluator - identity, features, OTD estimate and price tiers."""

import pytest

from lotshoppr.config.feature_keywords import detect_features
from lotshoppr.services.offer_evaluator import (
    COUNTER_STEP,
    counter_price_for,
    estimate_otd,
    evaluate,
    find_dealbreaker,
    missing_must_haves,
)
from lotshoppr.services.offer_models import (
    Accept,
    Clarify,
    Criteria,
    FeatureCounter,
    Offer,
    PriceCounter,
    Reject,
)


def make_criteria(**overrides) -> Criteria:
    data = dict(
        request_id="req-1",
        customer_name="Jordan Lee",
        customer_email="jordan@example.com",
        zip_code="60614",
        year=2024,
        make="Honda",
        model="CR-V",
        target_price=30000,
        max_price=33000,
        tolerance_above_target=500,
        must_haves=("moonroof",),
        dealbreakers=("leather",),
    )
    data.update(overrides)
    return Criteria(**data)


def make_offer(**overrides) -> Offer:
    data = dict(
        dealer_id="dealer-1",
        request_id="req-1",
        raw_text="2024 Honda CR-V EX with a panoramic moonroof, cloth seats.",
        year=2024,
        make="Honda",
        model="CR-V",
        quoted_base_price=29000,
        doc_fee=500,
        other_fees=200,
        tax_estimated=0,
    )
    data.update(overrides)
    return Offer(**data)


class TestScenarios:

    def test_matching_offer_under_target_is_accepted(self):
        result = evaluate(make_criteria(), make_offer())
        assert isinstance(result, Accept)
        assert result.decision == "accept"
        assert result.reason == "meets_or_beats_target"
        assert result.otd_estimate == 29700

    def test_missing_must_have_is_a_counter(self):
        offer = make_offer(raw_text="2024 Honda CR-V EX, cloth seats, ready today.")
        result = evaluate(make_criteria(), offer)
        assert isinstance(result, FeatureCounter)
        assert result.decision == "counter"
        assert result.reason == "missing_features"
        assert result.missing_must_haves == ("moonroof",)

    def test_dealbreaker_is_rejected(self):
        offer = make_offer(raw_text="Loaded with a moonroof and leather seats.")
        result = evaluate(make_criteria(), offer)
        assert isinstance(result, Reject)
        assert result.reason == "dealbreaker_feature"
        assert result.dealbreaker_hit == "leather"
        assert result.otd_estimate is None

    def test_no_price_asks_for_clarification(self):
        offer = make_offer(quoted_base_price=None, msrp=None)
        result = evaluate(make_criteria(), offer)
        assert isinstance(result, Clarify)
        assert result.decision == "clarify"
        assert result.reason == "no_price_parsed"
        assert "otd_estimate" not in result.to_dict()


class TestIdentity:

    def test_wrong_year(self):
        result = evaluate(make_criteria(), make_offer(year=2023))
        assert isinstance(result, Reject)
        assert result.reason == "wrong_year"

    def test_wrong_make_is_case_insensitive(self):
        assert evaluate(make_criteria(), make_offer(make="HONDA")).decision == "accept"
        result = evaluate(make_criteria(), make_offer(make="Toyota"))
        assert result.reason == "wrong_make"

    def test_wrong_model(self):
        result = evaluate(make_criteria(), make_offer(model="Pilot"))
        assert result.decision == "reject"
        assert result.reason == "wrong_model"

    def test_absent_identity_fields_are_not_compared(self):
        offer = make_offer(year=None, make=None, model=None)
        assert evaluate(make_criteria(), offer).decision == "accept"

    def test_identity_beats_everything_else(self):
        offer = make_offer(
            year=2020,
            raw_text="leather seats, no moonroof mention",
            quoted_base_price=None,
        )
        assert evaluate(make_criteria(), offer).reason == "wrong_year"

    def test_year_checked_before_make(self):
        result = evaluate(make_criteria(), make_offer(year=2022, make="Kia"))
        assert result.reason == "wrong_year"


class TestFeatures:

    def test_detects_vocabulary_in_order(self):
        text = "Navigation, HEATED SEATS, sunroof and Blind-Spot monitoring"
        assert detect_features(text) == ["sunroof", "blind-spot", "heated seats", "navigation"]

    def test_detect_features_handles_empty_text(self):
        assert detect_features("") == []
        assert detect_features(None) == []

    def test_must_have_satisfied_by_containing_feature(self):
        # "heated" is contained in the detected phrase "heated seats"
        assert missing_must_haves(["Heated"], ["heated seats"]) == []

    def test_missing_must_haves_keep_original_order(self):
        missing = missing_must_haves(["navigation", "moonroof", "cloth"], ["cloth"])
        assert missing == ["navigation", "moonroof"]

    def test_must_have_longer_than_keyword_is_never_satisfied(self):
        # Matching is substring of the detected phrase, not the other way round
        assert missing_must_haves(["panoramic moonroof"], ["moonroof"]) == ["panoramic moonroof"]

    def test_must_haves_checked_before_dealbreakers(self):
        offer = make_offer(raw_text="Leather seats throughout.")
        result = evaluate(make_criteria(), offer)
        assert result.reason == "missing_features"

    def test_first_dealbreaker_wins(self):
        hit = find_dealbreaker(["cloth", "leather"], ["leather", "cloth"])
        assert hit == "cloth"

    def test_no_dealbreaker(self):
        assert find_dealbreaker(["leather"], ["cloth"]) is None

    def test_features_checked_before_price(self):
        offer = make_offer(raw_text="no features listed", quoted_base_price=None)
        assert evaluate(make_criteria(), offer).reason == "missing_features"


class TestOtdEstimate:

    def test_sums_base_and_fees(self):
        assert estimate_otd(make_offer(tax_estimated=1800)) == 31500

    def test_falls_back_to_msrp(self):
        offer = make_offer(quoted_base_price=None, msrp=31000, doc_fee=None, other_fees=None)
        assert estimate_otd(offer) == 31000

    def test_quoted_price_preferred_over_msrp(self):
        assert estimate_otd(make_offer(msrp=35000)) == 29700

    def test_missing_fees_count_as_zero(self):
        offer = make_offer(doc_fee=None, other_fees=None, tax_estimated=None)
        assert estimate_otd(offer) == 29000

    def test_zero_base_is_still_a_price(self):
        offer = make_offer(quoted_base_price=0, doc_fee=0, other_fees=0)
        assert estimate_otd(offer) == 0

    def test_undefined_without_base(self):
        assert estimate_otd(Offer.unknown("d", "r", "text")) is None


class TestPriceTiers:
    """Target 30000, max 33000, tolerance 500."""

    def _evaluate_at(self, otd: float, **criteria_overrides):
        offer = make_offer(
            quoted_base_price=otd, doc_fee=None, other_fees=None, tax_estimated=None,
        )
        return evaluate(make_criteria(**criteria_overrides), offer)

    def test_exactly_target_accepts(self):
        result = self._evaluate_at(30000)
        assert result.reason == "meets_or_beats_target"

    def test_within_tolerance_accepts(self):
        result = self._evaluate_at(30400)
        assert isinstance(result, Accept)
        assert result.reason == "within_tolerance"
        assert result.otd_estimate == 30400

    def test_tolerance_boundary_is_inclusive(self):
        assert self._evaluate_at(30500).reason == "within_tolerance"
        assert self._evaluate_at(30501).reason == "above_target_but_under_max"

    def test_counter_between_tolerance_and_max(self):
        result = self._evaluate_at(32000)
        assert isinstance(result, PriceCounter)
        assert result.decision == "counter"
        assert result.otd_estimate == 32000
        assert result.counter_price == 30000

    def test_max_boundary_is_inclusive(self):
        assert self._evaluate_at(33000).decision == "counter"
        result = self._evaluate_at(33001)
        assert isinstance(result, Reject)
        assert result.reason == "over_max_price"
        assert result.otd_estimate == 33001

    def test_tolerance_never_lifts_above_max(self):
        result = self._evaluate_at(33200, tolerance_above_target=5000)
        assert result.reason == "over_max_price"

    def test_counter_price_uses_step_when_close_to_target(self):
        # Zero tolerance: 30100 is a counter, and 30100 - 250 < 30000
        result = self._evaluate_at(30100, tolerance_above_target=0)
        assert result.counter_price == 30100 - COUNTER_STEP

    def test_counter_price_never_exceeds_target_or_offer(self):
        for otd in (30100, 30600, 31000, 32999):
            counter = counter_price_for(30000, otd)
            assert counter <= 30000
            assert counter < otd

    @pytest.mark.parametrize("otd,expected", [
        (0, "accept"),
        (29999, "accept"),
        (30000, "accept"),
        (30250, "accept"),
        (30500, "accept"),
        (30501, "counter"),
        (32500, "counter"),
        (33000, "counter"),
        (33001, "reject"),
        (50000, "reject"),
    ])
    def test_decisions_are_monotonic_in_price(self, otd, expected):
        assert self._evaluate_at(otd).decision == expected


class TestEvaluationShape:

    def test_accept_to_dict(self):
        data = evaluate(make_criteria(), make_offer()).to_dict()
        assert data == {
            "decision": "accept",
            "reason": "meets_or_beats_target",
            "otd_estimate": 29700,
        }

    def test_feature_counter_to_dict_lists_missing(self):
        offer = make_offer(raw_text="")
        data = evaluate(make_criteria(must_haves=("moonroof", "navigation")), offer).to_dict()
        assert data["decision"] == "counter"
        assert data["missing_must_haves"] == ["moonroof", "navigation"]
        assert "counter_price" not in data

    def test_price_counter_to_dict(self):
        offer = make_offer(quoted_base_price=31500, doc_fee=500, other_fees=0)
        data = evaluate(make_criteria(), offer).to_dict()
        assert data == {
            "decision": "counter",
            "reason": "above_target_but_under_max",
            "otd_estimate": 32000,
            "counter_price": 30000,
        }

    def test_evaluate_is_deterministic(self):
        criteria, offer = make_criteria(), make_offer(quoted_base_price=31000)
        assert evaluate(criteria, offer) == evaluate(criteria, offer)

    def test_unknown_offer_never_raises(self):
        result = evaluate(make_criteria(must_haves=(), dealbreakers=()), Offer.unknown("d", "r"))
        assert isinstance(result, Clarify)
