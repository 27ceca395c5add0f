"""Tests for ``typedjobs.core.errors`` - the closed error taxonomy."""

import pickle

import pytest

from typedjobs.core.errors import (
    ErrorCategory,
    ErrorContext,
    InvalidArgsError,
    JobNotImplementedError,
    SchemaNotDefinedError,
    SerializationError,
    TypedJobError,
    UnknownJobError,
    is_passthrough,
)


class TestHierarchy:
    """Every error kind derives from TypedJobError."""

    @pytest.mark.parametrize(
        "error_cls",
        [SchemaNotDefinedError, InvalidArgsError, SerializationError, JobNotImplementedError, UnknownJobError],
    )
    def test_subclasses_base(self, error_cls):
        assert issubclass(error_cls, TypedJobError)

    def test_not_implemented_is_also_builtin_not_implemented(self):
        error = JobNotImplementedError("Job must implement the run() method")
        assert isinstance(error, NotImplementedError)
        assert isinstance(error, TypedJobError)

    def test_default_categories(self):
        assert TypedJobError("x").category == ErrorCategory.EXECUTION
        assert SchemaNotDefinedError("x").category == ErrorCategory.CONFIG
        assert InvalidArgsError("x").category == ErrorCategory.VALIDATION
        assert SerializationError("x").category == ErrorCategory.SERIALIZATION
        assert UnknownJobError("Nope").category == ErrorCategory.CONFIG


class TestTypedJobError:
    """Context, chaining and serialization on the base error."""

    def test_message_is_str(self):
        error = InvalidArgsError("Invalid arguments for Double: bad")
        assert str(error) == "Invalid arguments for Double: bad"
        assert error.message == "Invalid arguments for Double: bad"

    def test_cause_is_chained(self):
        original = RuntimeError("boom")
        error = TypedJobError("wrapped", cause=original)
        assert error.cause is original
        assert error.__cause__ is original

    def test_with_context_sets_known_fields_and_metadata(self):
        error = SerializationError("failed").with_context(job="Double", operation="serialize", attempt=2)
        assert error.context.job == "Double"
        assert error.context.operation == "serialize"
        assert error.context.metadata == {"attempt": 2}

    def test_with_context_returns_self(self):
        error = TypedJobError("x")
        assert error.with_context(job="A") is error

    def test_to_dict(self):
        error = InvalidArgsError("bad", cause=ValueError("inner")).with_context(job="Double")
        assert error.to_dict() == {
            "error_type": "InvalidArgsError",
            "message": "bad",
            "category": "VALIDATION",
            "context": {"job": "Double"},
            "cause": "inner",
        }

    def test_to_dict_omits_empty_context(self):
        assert "context" not in TypedJobError("x").to_dict()

    def test_repr(self):
        assert repr(InvalidArgsError("bad")) == "InvalidArgsError('bad', category=VALIDATION)"


class TestErrorContext:
    def test_to_dict_excludes_none(self):
        assert ErrorContext(job="Double").to_dict() == {"job": "Double"}

    def test_metadata_merged(self):
        ctx = ErrorContext(job_id="abc", metadata={"queue": "default"})
        assert ctx.to_dict() == {"job_id": "abc", "queue": "default"}


class TestUnknownJobError:
    def test_lists_available_jobs(self):
        error = UnknownJobError("Missing", ["A", "B"])
        assert "'Missing'" in str(error)
        assert "A, B" in str(error)
        assert error.context.job == "Missing"

    def test_none_available(self):
        assert "Available jobs: none" in str(UnknownJobError("Missing"))

    def test_survives_pickling(self):
        restored = pickle.loads(pickle.dumps(UnknownJobError("Missing", ["A"])))
        assert restored.message == "No job registered as 'Missing'. Available jobs: A"
        assert restored.available == ["A"]


class TestIsPassthrough:
    def test_taxonomy_errors_pass_through(self):
        assert is_passthrough(InvalidArgsError("x"))
        assert is_passthrough(SerializationError("x"))
        assert is_passthrough(TypedJobError("x"))

    def test_foreign_errors_do_not(self):
        assert not is_passthrough(RuntimeError("x"))
        assert not is_passthrough(NotImplementedError("x"))
