"""Credit scoring engine - suggested credit limit, risk tier and factor breakdown"""

import math
from typing import List
from credit_desk.domain.models import ApplicantProfile, CreditAssessment, CreditFactor
from credit_desk.domain.exceptions import InvalidApplicantError

MAX_CREDIT_SCORE = 850
INCOME_MULTIPLIER = 3
INCOME_BASELINE = 10_000  # Monthly income that earns a full income factor
RELATIONSHIP_BASELINE_YEARS = 5


def calculate_debt_ratio(monthly_income: float, current_debt: float) -> float:
    """Current debt as a fraction of monthly income"""
    if monthly_income <= 0:
        raise InvalidApplicantError("Monthly income must be greater than zero")
    return current_debt / monthly_income


def apply_debt_penalty(limit: float, debt_ratio: float) -> float:
    """Reduce limit by 40% above a 50% debt ratio, by 20% above 30%"""
    if debt_ratio > 0.5:
        return limit * 0.6
    elif debt_ratio > 0.3:
        return limit * 0.8
    return limit


def apply_loyalty_bonus(limit: float, years_with_store: float) -> float:
    """Reward long-standing customers: +20% from two years, +10% from one"""
    if years_with_store >= 2:
        return limit * 1.2
    elif years_with_store >= 1:
        return limit * 1.1
    return limit


def determine_risk_level(credit_score: float, payment_history_percent: float, debt_ratio: float) -> str:
    """
    Map applicant metrics to a risk tier.

    The low-risk test is evaluated first, then the high-risk test; anything
    matching neither is medium.
    """
    if credit_score >= 750 and payment_history_percent >= 90 and debt_ratio < 0.3:
        return "low"
    elif credit_score < 600 or payment_history_percent < 70 or debt_ratio > 0.5:
        return "high"
    return "medium"


def _clamp_percent(value: float) -> float:
    return max(0.0, min(100.0, value))


def build_factors(profile: ApplicantProfile, debt_ratio: float) -> List[CreditFactor]:
    """
    Five fixed breakdown dimensions, each clamped to 0-100.

    Clamping is for display only and never feeds back into the limit.
    """
    return [
        CreditFactor(
            name="Monthly income",
            impact_percent=_clamp_percent(profile.monthly_income / INCOME_BASELINE * 100),
            description="Higher income increases the ability to pay",
        ),
        CreditFactor(
            name="Credit score",
            impact_percent=_clamp_percent(profile.credit_score / MAX_CREDIT_SCORE * 100),
            description="Reflects the customer's credit history",
        ),
        CreditFactor(
            name="Payment history",
            impact_percent=_clamp_percent(profile.payment_history_percent),
            description="Share of payments made on time",
        ),
        CreditFactor(
            name="Debt ratio",
            impact_percent=_clamp_percent(100 - debt_ratio * 100),
            description="A lower debt ratio raises the credit limit",
        ),
        CreditFactor(
            name="Relationship duration",
            impact_percent=_clamp_percent(profile.years_with_store / RELATIONSHIP_BASELINE_YEARS * 100),
            description="Long-standing customers are more reliable",
        ),
    ]


def assess_credit(profile: ApplicantProfile) -> CreditAssessment:
    """
    Main entry point: suggest a credit limit and risk tier for an applicant.

    Limit = income x 3, scaled by credit score / 850, penalised by debt ratio,
    scaled by payment history, boosted by store loyalty, rounded to a whole
    currency unit (halves round up).

    Raises:
        InvalidApplicantError: monthly income is zero or negative, or the
            inputs overflow the limit or debt ratio
    """
    debt_ratio = calculate_debt_ratio(profile.monthly_income, profile.current_debt)

    limit = profile.monthly_income * INCOME_MULTIPLIER
    limit *= profile.credit_score / MAX_CREDIT_SCORE
    limit = apply_debt_penalty(limit, debt_ratio)
    limit *= profile.payment_history_percent / 100
    limit = apply_loyalty_bonus(limit, profile.years_with_store)

    if not (math.isfinite(limit) and math.isfinite(debt_ratio)):
        raise InvalidApplicantError("Income and debt are too large to score")

    return CreditAssessment(
        credit_limit=math.floor(limit + 0.5),
        risk_level=determine_risk_level(profile.credit_score, profile.payment_history_percent, debt_ratio),
        debt_ratio=debt_ratio,
        factors=build_factors(profile, debt_ratio),
    )
