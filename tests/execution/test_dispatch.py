"""Tests for the dispatch side of ``JobPipeline``: deserialize, bind, run, wrap."""

import pytest
import structlog

from typedjobs import (
    InvalidArgsError,
    Job,
    JobNotImplementedError,
    SchemaNotDefinedError,
    SerializationError,
    TypedJobError,
)
from typedjobs.core.errors import ErrorCategory
from typedjobs.core.settings import reset_settings

from tests._support.jobs import (
    DeserializationFails,
    Double,
    InvalidSchema,
    RaisesError,
    RaisesTaxonomyError,
    UsingArgsAccessor,
    UsingGetAccessor,
    WithDefaults,
    WithoutArgs,
    WithoutRun,
)


class TestDispatch:
    def test_coerces_string_boolean(self):
        assert WithDefaults.dispatch({"required_field": "test", "optional_field": "true"}) == "test: True"

    def test_canonical_payload(self):
        assert Double.dispatch({"value": 21}) == 42

    def test_coerces_numeric_string(self):
        assert Double.dispatch({"value": "21"}) == 42

    def test_omitted_defaults(self):
        assert WithDefaults.dispatch({"required_field": "x"}) == "x: False"

    def test_accessors(self):
        assert UsingArgsAccessor.dispatch({"value": 4}) == 12
        assert UsingGetAccessor.dispatch({"value": 4}) == 5

    def test_without_args_ignores_payload(self):
        assert WithoutArgs.dispatch({}) == "works without args"
        assert WithoutArgs.dispatch({"stale": "key"}) == "works without args"

    def test_nested_dispatch_keeps_outer_log_context(self):
        class Outer(Job):
            job_name = "Outer"

            def run(self):
                inner = Double.dispatch({"value": 1})
                return inner, structlog.contextvars.get_contextvars().get("job")

        assert Outer.dispatch({}) == (2, "Outer")
        assert "job" not in structlog.contextvars.get_contextvars()


class TestDeserializationFailure:
    def test_uncoercible_boolean(self):
        with pytest.raises(SerializationError, match="Failed to deserialize args for WithDefaults"):
            WithDefaults.dispatch({"required_field": "test", "optional_field": "not_a_boolean"})

    def test_missing_required_field(self):
        with pytest.raises(SerializationError, match="required_field"):
            DeserializationFails.dispatch({"value": 1})

    def test_never_wrapped_as_run_error(self):
        with pytest.raises(SerializationError) as exc_info:
            DeserializationFails.dispatch({"value": "abc", "required_field": "x"})
        assert "#run" not in exc_info.value.message
        assert exc_info.value.category == ErrorCategory.SERIALIZATION

    def test_invalid_schema_on_dispatch(self):
        with pytest.raises(SchemaNotDefinedError):
            InvalidSchema.dispatch({})


class TestRunFailure:
    def test_wraps_with_job_name_and_message(self):
        with pytest.raises(TypedJobError) as exc_info:
            RaisesError.dispatch({"message": "boom"})
        error = exc_info.value
        assert error.message.startswith("Error in RaisesError#run: boom")
        assert "boom" in str(error)

    def test_chains_original_exception(self):
        with pytest.raises(TypedJobError) as exc_info:
            RaisesError.dispatch({"message": "boom"})
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.cause is exc_info.value.__cause__
        assert exc_info.value.context.job == "RaisesError"
        assert exc_info.value.context.operation == "run"

    def test_wrapped_error_is_the_generic_kind(self):
        with pytest.raises(TypedJobError) as exc_info:
            RaisesError.run_synchronously(message="boom")
        assert type(exc_info.value) is TypedJobError

    def test_includes_traceback_by_default(self):
        with pytest.raises(TypedJobError) as exc_info:
            RaisesError.dispatch({"message": "boom"})
        assert "Traceback (most recent call last)" in exc_info.value.message
        assert "RuntimeError: boom" in exc_info.value.message

    def test_traceback_can_be_disabled(self, monkeypatch):
        monkeypatch.setenv("TYPEDJOBS_INCLUDE_TRACEBACK", "false")
        reset_settings()
        with pytest.raises(TypedJobError) as exc_info:
            RaisesError.dispatch({"message": "boom"})
        assert exc_info.value.message == "Error in RaisesError#run: boom"

    def test_synchronous_run_wraps_the_same_way(self):
        with pytest.raises(TypedJobError, match="Error in RaisesError#run: sync boom"):
            RaisesError.run_synchronously(message="sync boom")


class TestPassThrough:
    def test_missing_run(self):
        with pytest.raises(JobNotImplementedError, match="WithoutRun must implement the run\\(\\) method"):
            WithoutRun.dispatch({"value": 1})

    def test_missing_run_is_also_not_implemented(self):
        with pytest.raises(NotImplementedError):
            WithoutRun.run_synchronously(value=1)

    def test_missing_run_is_not_wrapped(self):
        with pytest.raises(TypedJobError) as exc_info:
            WithoutRun.dispatch({"value": 1})
        assert "#run" not in exc_info.value.message
        assert exc_info.value.__cause__ is None

    def test_taxonomy_error_from_body_passes_through(self):
        with pytest.raises(InvalidArgsError, match="Invalid arguments for Double"):
            RaisesTaxonomyError.dispatch({})
