"""
Loan Affordability Classifier for CreditKeeper.

An educational heuristic, not real underwriting. Given loan terms, the
borrower's current monthly obligations and monthly income it computes the
amortized payment, rates three dimensions and combines them into a
reasonable / stretch / unreasonable verdict with reasons and suggestions.
"""

from typing import List

from creditkeeper.domain.exceptions import InvalidLoanRequestException
from creditkeeper.utils.numbers import round_half_up

from .models import (
    AprAssessment,
    DtiImpact,
    LoanRating,
    LoanReasonableness,
    LoanScenario,
    LoanToIncomeImpact,
)
from .settings import LoanSettings, loan_settings


def calculate_monthly_payment(principal: float, apr: float, term_months: int) -> float:
    """
    Calculate the fixed monthly payment with the standard amortization formula.

    payment = P * r(1+r)^n / ((1+r)^n - 1), with r = APR / 100 / 12.
    A 0% APR splits the principal evenly over the term.

    Args:
        principal: Loan amount
        apr: Annual percentage rate in percent
        term_months: Number of monthly payments

    Returns:
        Monthly payment rounded to the cent
    """
    if apr == 0:
        return round_half_up(principal / term_months, 2)

    monthly_rate = apr / 100 / 12
    growth = (1 + monthly_rate) ** term_months
    payment = principal * (monthly_rate * growth) / (growth - 1)

    return round_half_up(payment, 2)


def calculate_principal_for_payment(apr: float, term_months: int, target_payment: float) -> float:
    """
    Inverse amortization: the principal a given monthly payment can carry.

    Args:
        apr: Annual percentage rate in percent
        term_months: Number of monthly payments
        target_payment: Monthly payment to solve for

    Returns:
        Principal rounded to the whole currency unit
    """
    if apr == 0:
        return round_half_up(target_payment * term_months)

    monthly_rate = apr / 100 / 12
    growth = (1 + monthly_rate) ** term_months
    principal = target_payment * (growth - 1) / (monthly_rate * growth)

    return round_half_up(principal)


def assess_dti(dti: float, settings: LoanSettings = loan_settings) -> DtiImpact:
    """Rate the post-loan debt-to-income ratio."""
    if dti <= settings.dti_healthy_max:
        return DtiImpact.HEALTHY
    elif dti <= settings.dti_moderate_max:
        return DtiImpact.MODERATE
    return DtiImpact.HIGH


def assess_apr(apr: float, settings: LoanSettings = loan_settings) -> AprAssessment:
    """Rate the loan's APR."""
    if apr <= settings.apr_healthy_max:
        return AprAssessment.HEALTHY
    elif apr <= settings.apr_expensive_max:
        return AprAssessment.EXPENSIVE
    return AprAssessment.HIGH_RISK


def assess_loan_to_income(lti: float, settings: LoanSettings = loan_settings) -> LoanToIncomeImpact:
    """Rate the principal relative to annual income."""
    if lti <= settings.lti_normal_max:
        return LoanToIncomeImpact.NORMAL
    elif lti <= settings.lti_aggressive_max:
        return LoanToIncomeImpact.AGGRESSIVE
    return LoanToIncomeImpact.HIGH_RISK


def determine_overall_rating(
    dti_impact: DtiImpact,
    apr_assessment: AprAssessment,
    lti_impact: LoanToIncomeImpact,
) -> LoanReasonableness:
    """
    Combine the three dimension ratings into one verdict.

    Any dimension at its worst tier makes the loan unreasonable; otherwise
    any dimension at its middle tier makes it a stretch.
    """
    if (
        dti_impact == DtiImpact.HIGH
        or apr_assessment == AprAssessment.HIGH_RISK
        or lti_impact == LoanToIncomeImpact.HIGH_RISK
    ):
        return LoanReasonableness.UNREASONABLE

    if (
        dti_impact == DtiImpact.MODERATE
        or apr_assessment == AprAssessment.EXPENSIVE
        or lti_impact == LoanToIncomeImpact.AGGRESSIVE
    ):
        return LoanReasonableness.STRETCH

    return LoanReasonableness.REASONABLE


def generate_reasons(
    new_dti: float,
    apr: float,
    lti: float,
    settings: LoanSettings = loan_settings,
) -> List[str]:
    """
    Explain each dimension in one sentence.

    Always returns exactly three reasons (DTI, APR, loan-to-income),
    regardless of the verdict.
    """
    reasons = []
    dti_pct = f"{new_dti * 100:.1f}%"
    healthy_pct = f"{settings.dti_healthy_max * 100:.0f}%"
    moderate_pct = f"{settings.dti_moderate_max * 100:.0f}%"

    dti_impact = assess_dti(new_dti, settings)
    if dti_impact == DtiImpact.HEALTHY:
        reasons.append(f"Debt-to-income ratio of {dti_pct} is within healthy range (at or below {healthy_pct})")
    elif dti_impact == DtiImpact.MODERATE:
        reasons.append(f"Debt-to-income ratio of {dti_pct} is elevated but manageable ({healthy_pct}-{moderate_pct})")
    else:
        reasons.append(f"Debt-to-income ratio of {dti_pct} is very high (above {moderate_pct})")

    apr_assessment = assess_apr(apr, settings)
    if apr_assessment == AprAssessment.HEALTHY:
        reasons.append(f"APR of {apr:.1f}% is competitive and affordable")
    elif apr_assessment == AprAssessment.EXPENSIVE:
        reasons.append(
            f"APR of {apr:.1f}% is expensive "
            f"({settings.apr_healthy_max:.0f}-{settings.apr_expensive_max:.0f}%)"
        )
    else:
        reasons.append(f"APR of {apr:.1f}% is extremely high (above {settings.apr_expensive_max:.0f}%)")

    lti_pct = f"{lti * 100:.0f}%"
    lti_impact = assess_loan_to_income(lti, settings)
    if lti_impact == LoanToIncomeImpact.NORMAL:
        reasons.append(f"Loan amount is {lti_pct} of annual income - reasonable size")
    elif lti_impact == LoanToIncomeImpact.AGGRESSIVE:
        reasons.append(f"Loan amount is {lti_pct} of annual income - aggressive borrowing")
    else:
        reasons.append(f"Loan amount exceeds annual income ({lti_pct}) - very high risk")

    return reasons


def generate_suggestions(
    rating: LoanReasonableness,
    loan: LoanScenario,
    new_dti: float,
    monthly_payment: float,
    monthly_income: float,
    settings: LoanSettings = loan_settings,
) -> List[str]:
    """
    Generate actionable suggestions for the verdict.

    Reasonable loans get two encouragement sentences. Otherwise suggestions
    are built from whichever conditions apply: DTI above target, a short
    term, an expensive APR, a large principal, and a hardship warning for
    unreasonable loans.
    """
    if rating == LoanReasonableness.REASONABLE:
        return [
            "This loan fits well within your budget",
            "Continue making on-time payments to maintain good credit",
        ]

    suggestions = []
    target_pct = f"{settings.target_dti * 100:.0f}%"

    if new_dti > settings.target_dti:
        existing_debt = monthly_income * new_dti - monthly_payment
        target_payment = monthly_income * settings.target_dti - existing_debt
        if target_payment > 0:
            suggestions.append(
                f"Reduce monthly payment to ~${target_payment:.0f} to keep DTI below {target_pct}"
            )

            better_amount = calculate_principal_for_payment(loan.apr, loan.term_months, target_payment)
            if 0 < better_amount < loan.loan_amount:
                suggestions.append(
                    f"Consider borrowing ~${better_amount:.0f} instead to maintain healthy DTI"
                )

    if loan.term_months < settings.term_extension_below_months and new_dti > settings.target_dti:
        longer_term = loan.term_months + settings.term_extension_months
        longer_payment = calculate_monthly_payment(loan.loan_amount, loan.apr, longer_term)
        suggestions.append(f"Extend term to {longer_term} months (payment: ${longer_payment:.2f}/mo)")

    if loan.apr > settings.apr_healthy_max:
        suggestions.append("Shop for better interest rates before committing")
        suggestions.append("Consider improving credit score before borrowing")

    if loan.loan_amount > monthly_income * settings.large_loan_income_multiple:
        suggestions.append("Consider making a larger down payment")
        suggestions.append("Evaluate if the full amount is necessary")

    if rating == LoanReasonableness.UNREASONABLE:
        suggestions.append("Warning: this loan may cause financial hardship - reconsider or delay")

    return suggestions


def rate_loan(
    loan: LoanScenario,
    current_monthly_debt: float,
    monthly_income: float,
    settings: LoanSettings = loan_settings,
    income_assumed: bool = False,
) -> LoanRating:
    """
    Rate how reasonable a new loan is for the borrower.

    Args:
        loan: The loan terms
        current_monthly_debt: Existing monthly obligations
        monthly_income: Monthly income (must be positive)
        settings: Loan settings (uses defaults if not provided)
        income_assumed: Flag the rating as based on an assumed income

    Returns:
        LoanRating with verdict, payment, ratios, reasons and suggestions

    Raises:
        InvalidLoanRequestException: If the loan terms are invalid
        ValueError: If monthly_income is not positive
    """
    errors = loan.validate()
    if errors:
        raise InvalidLoanRequestException("; ".join(errors))

    if monthly_income <= 0:
        raise ValueError("monthly_income must be positive to rate a loan")

    monthly_payment = calculate_monthly_payment(loan.loan_amount, loan.apr, loan.term_months)
    new_dti = (current_monthly_debt + monthly_payment) / monthly_income
    loan_to_income = loan.loan_amount / (monthly_income * 12)

    dti_impact = assess_dti(new_dti, settings)
    apr_assessment = assess_apr(loan.apr, settings)
    lti_impact = assess_loan_to_income(loan_to_income, settings)

    rating = determine_overall_rating(dti_impact, apr_assessment, lti_impact)

    return LoanRating(
        rating=rating,
        monthly_payment=monthly_payment,
        new_dti=round_half_up(new_dti * 100, 1),
        dti_impact=dti_impact,
        apr_assessment=apr_assessment,
        loan_to_income_impact=lti_impact,
        loan_to_income_ratio=round_half_up(loan_to_income * 100, 1),
        reasons=generate_reasons(new_dti, loan.apr, loan_to_income, settings),
        suggestions=generate_suggestions(
            rating, loan, new_dti, monthly_payment, monthly_income, settings
        ),
        income_assumed=income_assumed,
    )
