"""Error Hierarchy — tests for codes, categories and the response envelope."""

from made.core.errors import (
    ConcurrencyError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    InvalidTransitionError,
    MadeError,
    MessagingLockedError,
    NotFoundError,
    OperatorAuthError,
)


def test_domain_errors_are_recoverable():
    err = NotFoundError("User", "u1")
    assert isinstance(err, MadeError)
    assert err.code == "RESOURCE_NOT_FOUND"
    assert err.category == ErrorCategory.RESOURCE_NOT_FOUND
    assert err.recoverable
    assert "u1" in err.message


def test_database_error_is_critical():
    err = DatabaseError("boom", "commit")
    assert err.severity == ErrorSeverity.CRITICAL
    assert not err.recoverable
    assert err.operation == "commit"


def test_to_response_envelope():
    err = InvalidTransitionError(
        "nope", action="book", current_status="In Escrow",
        context=ErrorContext(user_id="u1", contract_id="c1", user_message="Already booked"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "INVALID_TRANSITION"
    assert body["message"] == "Already booked"
    assert body["category"] == "business_rule"
    assert body["severity"] == "warning"
    assert body["context"] == {"user_id": "u1", "project_id": None, "contract_id": "c1"}


def test_codes_are_distinct():
    codes = {
        MessagingLockedError("a", "b").code,
        OperatorAuthError().code,
        ConcurrencyError("x").code,
    }
    assert codes == {"MESSAGING_LOCKED", "OPERATOR_AUTH_FAILED", "CONCURRENCY_CONFLICT"}
