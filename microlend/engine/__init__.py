"""Write-side services: loan lifecycle, ledger, workforce and back office."""

from microlend.engine.admin import AdminService
from microlend.engine.base import BookService
from microlend.engine.ledger import LedgerService, projected_dividend
from microlend.engine.lifecycle import PAID_TOLERANCE, LoanEngine, RefinanceQuote
from microlend.engine.scoring import CreditScore, credit_score, score_label
from microlend.engine.terms import LoanTerms, compute_terms, net_proceeds, rate_for_term
from microlend.engine.workforce import WorkforceService

__all__ = [
    "AdminService",
    "BookService",
    "CreditScore",
    "LedgerService",
    "LoanEngine",
    "LoanTerms",
    "PAID_TOLERANCE",
    "RefinanceQuote",
    "WorkforceService",
    "compute_terms",
    "credit_score",
    "net_proceeds",
    "projected_dividend",
    "rate_for_term",
    "score_label",
]
