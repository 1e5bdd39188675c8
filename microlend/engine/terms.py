"""Flat-rate loan terms: interest, total payable and daily installment."""

from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal

from microlend.exceptions import ValidationError
from microlend.utils import ZERO, to_money

# Flat (non-compounding) rate per term length in days. Any other term
# falls into the default 60-day tier.
TERM_RATES: dict[int, Decimal] = {
    30: Decimal("0.05"),
    40: Decimal("0.10"),
}
DEFAULT_TERM = 60
DEFAULT_RATE = Decimal("0.20")
STANDARD_TERMS = (30, 40, 60)


@dataclass(frozen=True)
class LoanTerms:
    """Commercial terms derived from principal and term."""

    principal: Decimal
    term: int
    rate: Decimal
    interest: Decimal
    total: Decimal
    daily: Decimal


def rate_for_term(term_days: int) -> Decimal:
    """Look up the flat interest rate for a term length."""
    return TERM_RATES.get(term_days, DEFAULT_RATE)


def compute_terms(principal: Decimal | int | str, term_days: int) -> LoanTerms:
    """Compute interest, total and daily installment for a loan.

    Parameters
    ----------
    principal : Decimal | int | str
        Amount lent, must be positive.
    term_days : int
        Loan length in days, must be positive.

    Returns
    -------
    LoanTerms
        ``daily`` is rounded up to a whole currency unit so the installments
        never under-collect the total.
    """
    amount = to_money(principal)
    if amount <= ZERO:
        raise ValidationError(f"Principal must be positive, got {amount}")
    if isinstance(term_days, bool) or not isinstance(term_days, int) or term_days <= 0:
        raise ValidationError(f"Term must be a positive number of days, got {term_days!r}")

    rate = rate_for_term(term_days)
    interest = to_money(amount * rate)
    total = amount + interest
    daily = (total / term_days).to_integral_value(rounding=ROUND_CEILING)

    return LoanTerms(
        principal=amount,
        term=term_days,
        rate=rate,
        interest=interest,
        total=total,
        daily=to_money(daily),
    )


def net_proceeds(
    principal: Decimal,
    service_fee: Decimal = ZERO,
    delivery_charge: Decimal = ZERO,
    carried_balance: Decimal = ZERO,
) -> Decimal:
    """Cash actually handed to the borrower.

    Fees are taken out of the disbursed cash, never added to the balance.
    For a refinance ``carried_balance`` is the old loan's outstanding
    balance; a negative result means the borrower owes a top-up.
    """
    return to_money(principal) - to_money(carried_balance) - to_money(service_fee) - to_money(delivery_charge)
