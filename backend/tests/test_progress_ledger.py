"""Tests for the badge ledger and tool-badge awarding."""
import pytest

from conftest import make_fake_client
from schemas.advisory import CreditTips, FraudTip, LoanEligibility, Success
from services.catalog import get_badges
from services.context import FAMILY_BADGE, TOOL_BADGES, AppContext
from services.errors import UserInputError
from services.progress import ProgressLedger


class TestProgressLedger:

    def test_award_is_idempotent(self):
        ledger = ProgressLedger()
        assert ledger.award("quiz_whiz") is True
        assert ledger.award("quiz_whiz") is False
        assert ledger.earned() == ["quiz_whiz"]
        assert len(ledger) == 1

    def test_award_order_is_preserved(self):
        ledger = ProgressLedger()
        for badge in ["tax_savvy", "quiz_whiz", "loan_savvy", "quiz_whiz"]:
            ledger.award(badge)
        assert ledger.earned() == ["tax_savvy", "quiz_whiz", "loan_savvy"]

    def test_ledger_is_monotonic(self):
        ledger = ProgressLedger()
        seen = []
        for badge in ["a", "b", "a", "c", "b"]:
            ledger.award(badge)
            current = ledger.earned()
            assert current[:len(seen)] == seen
            seen = current

    def test_membership(self):
        ledger = ProgressLedger()
        ledger.award("credit_builder")
        assert "credit_builder" in ledger
        assert ledger.has("credit_builder")
        assert not ledger.has("loan_savvy")

    def test_badges_resolve_from_catalog(self):
        ledger = ProgressLedger()
        ledger.award("quiz_whiz")
        ledger.award("not_in_catalog")
        badges = ledger.badges()
        assert [b.id for b in badges] == ["quiz_whiz"]
        assert badges[0].name


class TestCatalog:

    def test_tool_badges_exist_in_catalog(self):
        catalog = get_badges()
        for badge_id in TOOL_BADGES.values():
            assert badge_id in catalog

    def test_quiz_badge_exists(self):
        assert "quiz_whiz" in get_badges()


class TestToolBadges:

    @pytest.mark.asyncio
    async def test_success_awards_tool_badge_once(self):
        client = make_fake_client(responses=[{"tips": ["a"]}, {"tips": ["b"]}])
        ctx = AppContext(client=client)
        await ctx.advise(CreditTips(credit_score=700))
        await ctx.advise(CreditTips(credit_score=710))
        assert ctx.ledger.earned() == ["credit_builder"]

    @pytest.mark.asyncio
    async def test_failure_awards_nothing(self):
        client = make_fake_client(responses=[{"eligibility": "Eligible"}])
        ctx = AppContext(client=client)
        req = LoanEligibility(age=30, monthly_income=1, monthly_expenses=1,
                              loan_amount=1, credit_score=700)
        await ctx.advise(req)
        assert len(ctx.ledger) == 0

    @pytest.mark.asyncio
    async def test_untracked_tool_awards_nothing(self):
        client = make_fake_client(responses=[{"tip": "x"}])
        ctx = AppContext(client=client)
        await ctx.advise(FraudTip())
        assert len(ctx.ledger) == 0

    @pytest.mark.asyncio
    async def test_badges_survive_profile_reset(self):
        client = make_fake_client(responses=[{"tips": ["a"]}])
        ctx = AppContext(client=client)
        await ctx.advise(CreditTips(credit_score=700))
        ctx.reset_profile()
        assert ctx.ledger.earned() == ["credit_builder"]


class TestFamilyBudget:

    def test_adding_family_expense_awards_badge_once(self):
        ctx = AppContext(client=make_fake_client())
        ctx.add_family_expense("Weekly shop", 120, "Groceries")
        ctx.add_family_expense("Electricity", 60, "Utilities")
        assert ctx.ledger.earned() == [FAMILY_BADGE]
        assert len(ctx.family_expenses.all()) == 2

    def test_invalid_family_expense_awards_nothing(self):
        ctx = AppContext(client=make_fake_client())
        with pytest.raises(UserInputError):
            ctx.add_family_expense("", 120, "Groceries")
        assert FAMILY_BADGE not in ctx.ledger

    @pytest.mark.asyncio
    async def test_optimize_sends_family_expenses(self):
        client = make_fake_client(responses=[{"suggested_savings_ratio": 22.5, "advice": "Shop weekly."}])
        ctx = AppContext(client=client)
        ctx.add_family_expense("Weekly shop", 120, "Groceries")

        result = await ctx.optimize_family_budget()

        assert isinstance(result, Success)
        assert result.payload.suggested_savings_ratio == 22.5
        assert ctx.ledger.earned() == [FAMILY_BADGE, "budget_optimizer"]
        prompt = client.models.generate_content.call_args.kwargs["contents"]
        assert "Groceries" in prompt

    @pytest.mark.asyncio
    async def test_optimize_without_expenses_rejected(self):
        ctx = AppContext(client=make_fake_client())
        with pytest.raises(UserInputError):
            await ctx.optimize_family_budget()
