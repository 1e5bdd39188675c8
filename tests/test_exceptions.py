"""Tests for custom exception hierarchy."""

import pytest

from microlend.exceptions import (
    CollectorNotFoundError,
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    InvestorNotFoundError,
    LoanNotFoundError,
    MicrolendError,
    PayrollAlreadyProcessedError,
    PersistenceError,
    ReferentialIntegrityError,
    SinkError,
    ValidationError,
)


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_microlend_error_is_exception(self) -> None:
        assert isinstance(MicrolendError("test"), Exception)

    @pytest.mark.parametrize(
        "error_cls",
        [
            ValidationError,
            EntityNotFoundError,
            InvalidEntityStateError,
            PersistenceError,
            ConfigurationError,
            SinkError,
        ],
    )
    def test_direct_subclasses(self, error_cls: type) -> None:
        assert isinstance(error_cls("test"), MicrolendError)

    @pytest.mark.parametrize(
        "error_cls",
        [LoanNotFoundError, CollectorNotFoundError, InvestorNotFoundError, ReferentialIntegrityError],
    )
    def test_not_found_family(self, error_cls: type) -> None:
        err = error_cls("test")
        assert isinstance(err, EntityNotFoundError)
        assert isinstance(err, MicrolendError)

    def test_payroll_already_processed_is_invalid_state(self) -> None:
        assert isinstance(PayrollAlreadyProcessedError("test"), InvalidEntityStateError)

    def test_exception_message(self) -> None:
        err = LoanNotFoundError("loans loan-001 not found")
        assert str(err) == "loans loan-001 not found"
