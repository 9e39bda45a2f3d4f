"""
Tests for the advisory gateway:
- every request kind resolves to Success or Failure, never raises
- strict schema validation (no coercion, required fields, enum values)
- timeouts and transport errors fold into Failure
- lesson recommendation short-circuit and id checks
"""
import json
import logging
import time
from datetime import date

import pytest

from conftest import make_fake_client
from schemas.advisory import (
    BudgetingAdvice,
    BudgetOptimization,
    CategorySuggestion,
    CreditTips,
    Failure,
    FinancialFact,
    FraudTip,
    GoalProjection,
    HealthcareCost,
    HealthScore,
    InsuranceAdvice,
    LessonRecommendation,
    LoanEligibility,
    PortfolioAdvice,
    QuizGeneration,
    RetirementReadiness,
    SpendingTrend,
    StudentLoanAdvice,
    Success,
    TaxEstimate,
    WithdrawalSustainability,
)
from schemas.catalog import Lesson
from schemas.finance import FinancialGoal, Holding, SpendItem
from services.gemini import AdvisoryGateway, build_prompt
from services.gemini.service import ALL_LESSONS_DONE


SPEND = (SpendItem(date="2024-05-01", category="Food & Drinks", amount=12.5),)

QUIZ_ITEM = {
    "question": "What is a budget?",
    "options": ["A plan for money", "A loan", "A tax", "A bank"],
    "answer": "A plan for money",
}

# (request, a payload that satisfies the contract)
CASES = [
    (
        LoanEligibility(age=30, monthly_income=5000, monthly_expenses=2000,
                        loan_amount=20000, credit_score=720),
        {"eligibility": "Eligible", "confidence_score": 82, "explanation": "Stable income.",
         "monthly_payment": 410.5, "max_loan_amount": 30000},
    ),
    (
        GoalProjection(goal=FinancialGoal(name="Car", target_amount=10000, current_amount=2000,
                                          monthly_contribution=500, deadline=date(2026, 1, 1))),
        {"likelihood": 70, "predicted_date": "2025-11", "suggestions": ["Save more"]},
    ),
    (
        RetirementReadiness(age=40, current_savings=100000, monthly_contribution=1000),
        {"readiness_score": 55, "predicted_corpus": 900000, "suggestions": ["Increase SIP"]},
    ),
    (
        TaxEstimate(annual_income=1200000, annual_deductions=150000),
        {"estimated_tax": 120000, "effective_tax_rate": 10.0,
         "breakdown": {"income_tax": 115000, "surcharge": 5000}, "tips": ["Use 80C"]},
    ),
    (
        CreditTips(credit_score=640),
        {"tips": ["Pay on time", "Lower utilization"]},
    ),
    (
        InsuranceAdvice(has_family=True, owns_home=False),
        {"recommendations": [{"type": "Term Life", "reason": "Dependents"}]},
    ),
    (
        PortfolioAdvice(holdings=(Holding(name="Index Fund", value=5000),)),
        {"suggestions": ["Diversify"]},
    ),
    (
        WithdrawalSustainability(corpus=1000000, monthly_withdrawal=5000, age=65),
        {"is_sustainable": True, "funds_deplete_age": 999, "suggestion": "Looks fine."},
    ),
    (
        HealthScore(monthly_income=4000, savings=10000, monthly_expenses=3000),
        {"score": 64, "summary": "Decent.", "suggestions": ["Build an emergency fund"]},
    ),
    (
        BudgetOptimization(transactions=SPEND),
        {"suggested_savings_ratio": 0.2, "advice": "Cook at home."},
    ),
    (
        QuizGeneration(topic="Budgeting", question_count=1),
        {"quiz": [QUIZ_ITEM]},
    ),
    (
        CategorySuggestion(description="Coffee"),
        {"category": "Food & Drinks"},
    ),
    (FraudTip(), {"tip": "Never share your OTP."}),
    (FinancialFact(), {"fact": "Compound interest grows over time."}),
    (
        HealthcareCost(age=70),
        {"predicted_annual_cost": 6000,
         "cost_breakdown": {"premiums": 3000, "medication": 2000, "out_of_pocket": 1000},
         "suggestion": "Review your plan."},
    ),
    (
        StudentLoanAdvice(amount=30000, interest_rate=6.5),
        {"monthly_payment": 340.6, "summary": "Manageable.", "tips": ["Pay extra early"]},
    ),
    (SpendingTrend(transactions=SPEND), {"summary": "Mostly food."}),
    (BudgetingAdvice(needs=50, wants=30, savings=20), {"advice": "Balanced."}),
]

IDS = [req.kind for req, _ in CASES]


def _gateway(*responses, **kwargs):
    client = make_fake_client(responses=list(responses))
    return AdvisoryGateway(client=client, **kwargs), client


class TestEveryKind:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_obj,payload", CASES, ids=IDS)
    async def test_valid_payload_is_success(self, request_obj, payload):
        gateway, client = _gateway(payload)
        result = await gateway.submit(request_obj)
        assert isinstance(result, Success)
        assert isinstance(result.payload, request_obj.result_model)
        client.models.generate_content.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_obj,payload", CASES, ids=IDS)
    async def test_missing_field_is_failure(self, request_obj, payload):
        """Dropping any required field fails validation."""
        broken = dict(payload)
        broken.pop(next(iter(broken)))
        gateway, _ = _gateway(broken)
        result = await gateway.submit(request_obj)
        assert isinstance(result, Failure)
        assert result.reason == request_obj.failure_reason

    @pytest.mark.asyncio
    @pytest.mark.parametrize("request_obj,payload", CASES, ids=IDS)
    async def test_malformed_json_is_failure(self, request_obj, payload):
        gateway, _ = _gateway("{not json")
        result = await gateway.submit(request_obj)
        assert isinstance(result, Failure)
        assert not result.ok

    @pytest.mark.parametrize("request_obj,payload", CASES, ids=IDS)
    def test_every_kind_has_a_prompt(self, request_obj, payload):
        assert build_prompt(request_obj).strip()


class TestStrictValidation:

    @pytest.mark.asyncio
    async def test_numeric_fields_pass_through_unmodified(self):
        payload = dict(CASES[0][1], confidence_score=82.37, monthly_payment=1234.5678)
        gateway, _ = _gateway(payload)
        result = await gateway.submit(CASES[0][0])
        assert result.payload.confidence_score == 82.37
        assert result.payload.monthly_payment == 1234.5678
        assert result.payload.max_loan_amount == 30000

    @pytest.mark.asyncio
    async def test_string_number_is_not_coerced(self):
        payload = dict(CASES[0][1], monthly_payment="410.5")
        gateway, _ = _gateway(payload)
        result = await gateway.submit(CASES[0][0])
        assert result == Failure(reason="Failed to get prediction from AI model.")

    @pytest.mark.asyncio
    async def test_unknown_eligibility_value_rejected(self):
        payload = dict(CASES[0][1], eligibility="Maybe")
        gateway, _ = _gateway(payload)
        assert isinstance(await gateway.submit(CASES[0][0]), Failure)

    @pytest.mark.asyncio
    async def test_category_outside_list_rejected(self):
        gateway, _ = _gateway({"category": "Groceries"})
        result = await gateway.submit(CategorySuggestion(description="Milk"))
        assert isinstance(result, Failure)

    @pytest.mark.asyncio
    async def test_quiz_answer_not_in_options_rejected(self):
        bad = dict(QUIZ_ITEM, answer="Something else")
        gateway, _ = _gateway({"quiz": [bad]})
        result = await gateway.submit(QuizGeneration(topic="Saving"))
        assert isinstance(result, Failure)

    @pytest.mark.asyncio
    async def test_quiz_needs_four_distinct_options(self):
        bad = dict(QUIZ_ITEM, options=["A plan for money", "A loan", "A loan", "A bank"])
        gateway, _ = _gateway({"quiz": [bad]})
        assert isinstance(await gateway.submit(QuizGeneration(topic="Saving")), Failure)

    @pytest.mark.asyncio
    async def test_predicted_date_must_be_year_month(self):
        req, payload = CASES[1]
        gateway, _ = _gateway(dict(payload, predicted_date="November 2025"))
        assert isinstance(await gateway.submit(req), Failure)

    @pytest.mark.asyncio
    async def test_empty_response_text_is_failure(self):
        gateway, _ = _gateway("")
        assert isinstance(await gateway.submit(FraudTip()), Failure)

    @pytest.mark.asyncio
    async def test_empty_quiz_is_still_success(self):
        """An empty quiz is structurally valid; the quiz runner decides what it means."""
        gateway, _ = _gateway({"quiz": []})
        result = await gateway.submit(QuizGeneration(topic="Saving"))
        assert isinstance(result, Success)
        assert result.payload.quiz == ()


class TestTransport:

    @pytest.mark.asyncio
    async def test_client_exception_is_failure(self):
        gateway, _ = _gateway(ConnectionError("network down"))
        result = await gateway.submit(FinancialFact())
        assert result == Failure(reason="Failed to get financial fact.")

    @pytest.mark.asyncio
    async def test_timeout_is_failure(self, settings):
        client = make_fake_client()

        def slow(**kwargs):
            time.sleep(0.5)

        client.models.generate_content.side_effect = slow
        fast = settings.model_copy(update={"advisory_timeout_seconds": 0.05})
        gateway = AdvisoryGateway(client=client, settings=fast)

        started = time.perf_counter()
        result = await gateway.submit(FraudTip())
        assert isinstance(result, Failure)
        assert time.perf_counter() - started < 0.4

    @pytest.mark.asyncio
    async def test_no_automatic_retry(self):
        gateway, client = _gateway(ConnectionError("boom"), {"tip": "unused"})
        await gateway.submit(FraudTip())
        assert client.models.generate_content.call_count == 1

    @pytest.mark.asyncio
    async def test_requests_strict_json_output(self):
        gateway, client = _gateway({"fact": "x"})
        await gateway.submit(FinancialFact())
        config = client.models.generate_content.call_args.kwargs["config"]
        assert config.response_mime_type == "application/json"


class TestLessonRecommendation:

    LESSONS = [
        Lesson(id="l1", title="Budgeting", content=["..."], quiz_topic="Budgeting", badge_to_award="b1"),
        Lesson(id="l2", title="Saving", content=["..."], quiz_topic="Saving", badge_to_award="b2"),
    ]

    @pytest.mark.asyncio
    async def test_all_completed_short_circuits(self):
        gateway, client = _gateway(lessons=self.LESSONS)
        result = await gateway.submit(LessonRecommendation(completed_lesson_ids=("l1", "l2")))
        assert isinstance(result, Success)
        assert result.payload.recommended_lesson_id == ""
        assert result.payload.reason == ALL_LESSONS_DONE
        client.models.generate_content.assert_not_called()

    @pytest.mark.asyncio
    async def test_recommends_available_lesson(self):
        gateway, client = _gateway(
            {"recommended_lesson_id": "l2", "reason": "Next step."}, lessons=self.LESSONS
        )
        result = await gateway.submit(LessonRecommendation(completed_lesson_ids=("l1",)))
        assert result.payload.recommended_lesson_id == "l2"
        prompt = client.models.generate_content.call_args.kwargs["contents"]
        assert "l2" in prompt

    @pytest.mark.asyncio
    async def test_completed_lesson_id_rejected(self):
        gateway, _ = _gateway(
            {"recommended_lesson_id": "l1", "reason": "Again."}, lessons=self.LESSONS
        )
        result = await gateway.submit(LessonRecommendation(completed_lesson_ids=("l1",)))
        assert result == Failure(reason="Failed to get lesson recommendation.")


class TestLogging:

    @pytest.mark.asyncio
    async def test_records_carry_call_type(self, caplog):
        caplog.set_level(logging.INFO, logger="coincoach.gemini")
        gateway, _ = _gateway({"fact": "x"}, ConnectionError("down"))
        await gateway.submit(FinancialFact())
        await gateway.submit(FraudTip())

        records = [r for r in caplog.records if r.name == "coincoach.gemini"]
        assert [(r.levelname, r.call_type) for r in records] == [
            ("INFO", "financial_fact"),
            ("WARNING", "fraud_tip"),
        ]

    def test_json_formatter_emits_call_type(self):
        from main import JSONFormatter

        record = logging.LogRecord(
            "coincoach.gemini", logging.INFO, __file__, 1, "Advisory call succeeded", None, None
        )
        record.call_type = "tax_estimate"
        line = json.loads(JSONFormatter().format(record))
        assert line["call_type"] == "tax_estimate"
        assert line["level"] == "INFO"
