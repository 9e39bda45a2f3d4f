"""Prompt builders, one per advisory request kind.

Each builder embeds the request's fields into a natural-language instruction.
The output shape is not described here; it is declared to Gemini separately
as the request's ``result_model``.
"""
import json
from typing import Callable

from schemas.advisory import (
    EXPENSE_CATEGORIES,
    BudgetingAdvice,
    BudgetOptimization,
    CategorySuggestion,
    CreditTips,
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
    TaxEstimate,
    WithdrawalSustainability,
)
from schemas.catalog import Lesson


def _loan(req: LoanEligibility) -> str:
    return (
        "Act as a loan eligibility prediction model. Based on the following financial data, "
        "determine if the user is likely to be approved for a loan.\n\n"
        "Data:\n"
        f"- Age: {req.age}\n"
        f"- Monthly Income: ₹{req.monthly_income}\n"
        f"- Monthly Expenses: ₹{req.monthly_expenses}\n"
        f"- Loan Amount: ₹{req.loan_amount}\n"
        f"- Credit Score: {req.credit_score}\n\n"
        "eligibility must be 'Eligible' or 'Not Eligible'. confidence_score is 0-100. "
        "Keep the explanation under 50 words. Estimate the monthly payment and a suggested "
        "maximum loan amount."
    )


def _goal(req: GoalProjection) -> str:
    g = req.goal
    return (
        "Act as a financial analyst. A user wants to achieve a financial goal.\n\n"
        "User's Goal Data:\n"
        f"- Goal Name: {g.name}\n"
        f"- Target Amount: ₹{g.target_amount}\n"
        f"- Current Amount Saved: ₹{g.current_amount}\n"
        f"- Planned Monthly Contribution: ₹{g.monthly_contribution}\n"
        f"- Target Deadline: {g.deadline.isoformat()}\n\n"
        "Your Task:\n"
        "1. Calculate the remaining amount to be saved.\n"
        "2. Calculate the number of months required with the current monthly contribution.\n"
        "3. Predict the completion date in 'YYYY-MM' format.\n"
        "4. Compare it with the deadline to give a likelihood of success (0-100). On or before "
        "the deadline is 90-100; slightly after is moderate; far off is low.\n"
        "5. Provide 2-3 concise, actionable suggestions to reach the goal faster."
    )


def _retirement(req: RetirementReadiness) -> str:
    return (
        "Act as a retirement planner. A user wants to understand their retirement readiness.\n\n"
        "User Data:\n"
        f"- Current Age: {req.age}\n"
        f"- Current Retirement Savings: ₹{req.current_savings}\n"
        f"- Monthly Contribution: ₹{req.monthly_contribution}\n\n"
        "Assumptions: retirement age 65, 7% annual return compounded annually.\n\n"
        "Your Task:\n"
        "1. Compute the future value of current savings and of the monthly contributions.\n"
        "2. Sum them to get the predicted corpus at 65.\n"
        "3. Give a readiness score 0-100 against a target corpus of ₹2 crore "
        "(₹1 crore is ~40-50, ₹2 crore ~80, ₹3 crore ~95).\n"
        "4. Provide 2 concise, actionable suggestions."
    )


def _tax(req: TaxEstimate) -> str:
    return (
        "Act as a tax calculator. Estimate the income tax for a user based on Indian tax slabs "
        "(New Regime).\n\n"
        "User Data:\n"
        f"- Annual Income: ₹{req.annual_income}\n"
        f"- Annual Deductions: ₹{req.annual_deductions} (most deductions are not allowed in the "
        "new regime, but consider the standard deduction)\n\n"
        "Your Task:\n"
        "1. Calculate taxable income assuming a standard deduction of ₹50,000 if applicable.\n"
        "2. Apply the new regime slabs to compute total tax, split into income tax and surcharge.\n"
        "3. Calculate the effective tax rate.\n"
        "4. Provide one tip for tax saving."
    )


def _credit(req: CreditTips) -> str:
    return (
        f"Act as a credit advisor. A young adult has a credit score of {req.credit_score}. "
        "Provide 3 concise, actionable tips to improve or maintain this score."
    )


def _insurance(req: InsuranceAdvice) -> str:
    return (
        "Act as an insurance advisor. Based on the user's profile, recommend essential "
        "insurance types.\n\n"
        "User Profile:\n"
        f"- Has a family: {str(req.has_family).lower()}\n"
        f"- Owns a home: {str(req.owns_home).lower()}\n\n"
        "Always recommend Health Insurance. Recommend Term Life Insurance if they have a family "
        "and Homeowners Insurance if they own a home. Give a one-sentence reason for each."
    )


def _portfolio(req: PortfolioAdvice) -> str:
    holdings = json.dumps([h.model_dump() for h in req.holdings])
    return (
        "Act as an investment advisor. Analyze the user's investment portfolio allocation.\n\n"
        f"Portfolio:\n{holdings}\n\n"
        "Analyze the allocation between asset classes and give 2 concise suggestions for "
        "rebalancing or diversification. Keep them general and educational."
    )


def _withdrawal(req: WithdrawalSustainability) -> str:
    return (
        "Act as a retirement fund sustainability calculator for a senior citizen.\n\n"
        "User Data:\n"
        f"- Total Retirement Corpus: ₹{req.corpus}\n"
        f"- Desired Monthly Withdrawal: ₹{req.monthly_withdrawal}\n"
        f"- Current Age: {req.age}\n\n"
        "Assume a 5% annual return on the corpus.\n\n"
        "Your Task:\n"
        "1. Calculate the annual withdrawal.\n"
        "2. Decide whether it is sustainable (annual withdrawal <= annual return).\n"
        "3. If not sustainable, give the age at which funds are depleted; use 999 if sustainable.\n"
        "4. Provide one suggestion for making the funds last longer."
    )


def _health_score(req: HealthScore) -> str:
    return (
        "Act as a financial health analyst. Based on the user's monthly financial data, "
        "calculate a Financial Health Score and provide feedback.\n\n"
        "User Data:\n"
        f"- Monthly Income: ₹{req.monthly_income}\n"
        f"- Total Savings/Investments: ₹{req.savings}\n"
        f"- Monthly Expenses: ₹{req.monthly_expenses}\n\n"
        "Score 0-100 from the savings rate ((income - expenses) / income, >20% is excellent) and "
        "the savings-to-income ratio (savings / (income * 12), >1 is good). Add a one-sentence "
        "summary and one actionable suggestion."
    )


def _budget_optimization(req: BudgetOptimization) -> str:
    txns = json.dumps([t.model_dump() for t in req.transactions])
    return (
        "Act as a budget optimization AI. Analyze the list of transactions.\n\n"
        f"Transactions:\n{txns}\n\n"
        "1. Calculate total spending.\n"
        "2. Identify the top spending category.\n"
        "3. Suggest a new savings ratio (as a percentage) assuming an income of ₹50,000.\n"
        "4. Give one concise piece of advice to reduce spending in the highest category."
    )


def _quiz(req: QuizGeneration) -> str:
    if req.question_count == 1:
        opening = f"Create one multiple-choice quiz question about the basics of {req.topic}"
    else:
        opening = (
            f"Create a {req.question_count}-question multiple-choice quiz about the basics "
            f"of {req.topic}"
        )
    return (
        f"{opening}, suitable for a teenager. For each question provide exactly 4 distinct "
        "answer options. The 'answer' must be exactly one of the strings in that question's "
        f"'options'. Put the {req.question_count} question object(s) in the 'quiz' array."
    )


def _category(req: CategorySuggestion) -> str:
    return (
        "Categorize the following expense description into one of these categories: "
        f"{', '.join(EXPENSE_CATEGORIES)}.\n\n"
        f'Expense: "{req.description}"'
    )


def _fraud(req: FraudTip) -> str:
    return (
        "Act as a fraud prevention expert for senior citizens. Provide one concise, actionable, "
        "easy-to-understand tip to help them avoid common financial scams, no longer than two "
        "sentences."
    )


def _fact(req: FinancialFact) -> str:
    return (
        "Provide one fun, interesting, and easy-to-understand financial fact suitable for a "
        "teenager. Keep it concise (1-2 sentences)."
    )


def lesson_recommendation_prompt(req: LessonRecommendation, available: list[Lesson]) -> str:
    options = json.dumps([{"id": l.id, "title": l.title} for l in available])
    return (
        f"A teenager has completed lessons with these IDs: [{', '.join(req.completed_lesson_ids)}].\n"
        "From the following list of available lessons, which one should they take next?\n"
        f"Available Lessons: {options}\n\n"
        "recommended_lesson_id must be one of the listed ids. reason is a short, encouraging, "
        "one-sentence explanation."
    )


def _healthcare(req: HealthcareCost) -> str:
    return (
        "Act as a healthcare cost prediction model for a senior citizen. Based on the user's age, "
        "provide an estimated annual healthcare budget.\n\n"
        f"Data:\n- Age: {req.age}\n\n"
        "Break the cost into insurance premiums, medication and out-of-pocket expenses, and add "
        "one tip (max 40 words) for managing healthcare costs in retirement."
    )


def _student_loan(req: StudentLoanAdvice) -> str:
    return (
        "Act as a student loan advisor for a young adult.\n"
        "Loan details:\n"
        f"- Amount: ₹{req.amount}\n"
        f"- Interest Rate: {req.interest_rate}%\n\n"
        "1. Calculate the monthly payment for a standard 10-year plan using "
        "M = P [ i(1 + i)^n ] / [ (1 + i)^n - 1 ] with i = annual rate / 12 and n = 120, "
        "rounded to 2 decimals.\n"
        "2. Give a one-sentence summary of the loan's impact.\n"
        "3. Give 2 key tips for managing student loans."
    )


def _spending_trend(req: SpendingTrend) -> str:
    txns = json.dumps([t.model_dump() for t in req.transactions])
    return (
        "Act as a financial analyst. Analyze the following transactions from the past month. "
        "Compare total spending of the most recent 7 days with the 7 days before that and "
        "identify the most significant trend.\n\n"
        f"Transactions:\n{txns}\n\n"
        "Summarize the trend in one easy-to-understand sentence."
    )


def _budgeting(req: BudgetingAdvice) -> str:
    return (
        "Act as a financial advisor for a young adult using the 50/30/20 rule "
        "(50% Needs, 30% Wants, 20% Savings).\n\n"
        "Current Spending Breakdown:\n"
        f"- Needs: ₹{req.needs}\n"
        f"- Wants: ₹{req.wants}\n"
        f"- Savings: ₹{req.savings}\n\n"
        "Give one concise, encouraging piece of advice to better align with the rule."
    )


PROMPT_BUILDERS: dict[type, Callable] = {
    LoanEligibility: _loan,
    GoalProjection: _goal,
    RetirementReadiness: _retirement,
    TaxEstimate: _tax,
    CreditTips: _credit,
    InsuranceAdvice: _insurance,
    PortfolioAdvice: _portfolio,
    WithdrawalSustainability: _withdrawal,
    HealthScore: _health_score,
    BudgetOptimization: _budget_optimization,
    QuizGeneration: _quiz,
    CategorySuggestion: _category,
    FraudTip: _fraud,
    FinancialFact: _fact,
    HealthcareCost: _healthcare,
    StudentLoanAdvice: _student_loan,
    SpendingTrend: _spending_trend,
    BudgetingAdvice: _budgeting,
}


def build_prompt(request) -> str:
    """Prompt for every kind except LessonRecommendation, which needs the catalog."""
    return PROMPT_BUILDERS[type(request)](request)
