"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from event_ledger.kernel.errors import (
    ApplicationError,
    BaseError,
    ConflictError,
    DomainError,
    InfrastructureError,
    InvalidVersionError,
    NotFoundError,
    SerializationError,
    UnknownEventTypeError,
    ValidationError,
)


# ---------------------------------------------------------------------------
# BaseError
# ---------------------------------------------------------------------------


class TestBaseError:
    def test_message_and_default_code(self) -> None:
        err = BaseError("boom")
        assert err.message == "boom"
        assert err.code == "base_error"
        assert err.detail == {}

    def test_explicit_code_wins(self) -> None:
        assert BaseError("x", code="custom").code == "custom"

    def test_str_is_json(self) -> None:
        err = DomainError("rule broken", detail={"k": 1})
        payload = json.loads(str(err))
        assert payload == {"code": "domain_error", "message": "rule broken", "detail": {"k": 1}}

    def test_cause_is_chained(self) -> None:
        cause = RuntimeError("io")
        err = InfrastructureError("wrapped", cause=cause)
        assert err.__cause__ is cause
        assert "cause" in err.to_dict()

    def test_repr(self) -> None:
        assert repr(ConflictError("c")) == "ConflictError(code='conflict', message='c')"


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ValidationError, ConflictError, InvalidVersionError, NotFoundError],
    )
    def test_domain_errors(self, cls: type) -> None:
        assert issubclass(cls, DomainError)

    def test_serialization_is_infrastructure(self) -> None:
        assert issubclass(UnknownEventTypeError, SerializationError)
        assert issubclass(SerializationError, InfrastructureError)

    def test_application_error_is_not_domain(self) -> None:
        assert not issubclass(ApplicationError, DomainError)


# ---------------------------------------------------------------------------
# Concrete errors
# ---------------------------------------------------------------------------


class TestConcreteErrors:
    def test_validation_error_records_field(self) -> None:
        err = ValidationError("bad", field="amount")
        assert err.field == "amount"
        assert err.detail == {"field": "amount"}

    def test_not_found_message(self) -> None:
        err = NotFoundError("Account", "a-1")
        assert err.message == "Account 'a-1' not found"
        assert err.identifier == "a-1"

    def test_not_found_without_identifier(self) -> None:
        assert NotFoundError("Account").message == "Account not found"

    def test_invalid_version_includes_range(self) -> None:
        err = InvalidVersionError(7, 4)
        assert err.message == "Invalid version 7. Valid range is 1 to 4."
        assert err.detail == {"requested": 7, "min_version": 1, "max_version": 4}

    def test_unknown_event_type(self) -> None:
        err = UnknownEventTypeError("Mystery")
        assert err.type_tag == "Mystery"
        assert err.code == "unknown_event_type"
        assert err.detail["type_tag"] == "Mystery"
