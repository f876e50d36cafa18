"""Unit tests for ObservationContext."""

import dataclasses

import pytest

from shared_kernel.observability_context import ObservationContext


class TestObservationContext:
    """Tests for ObservationContext."""

    def test_empty_context_has_no_keys(self):
        assert ObservationContext().as_dict() == {}

    def test_as_dict_skips_none_values(self):
        context = ObservationContext(request_id="req-1")

        assert context.as_dict() == {"request_id": "req-1"}

    def test_as_dict_includes_extra(self):
        context = ObservationContext(
            request_id="req-1",
            resource_address="atlas_project.analytics",
            extra={"attempt": 1},
        )

        assert context.as_dict() == {
            "request_id": "req-1",
            "resource_address": "atlas_project.analytics",
            "attempt": 1,
        }

    def test_with_extra_merges_without_mutating(self):
        context = ObservationContext(request_id="req-1", extra={"a": 1})

        extended = context.with_extra(b=2)

        assert extended.as_dict() == {"request_id": "req-1", "a": 1, "b": 2}
        assert context.extra == {"a": 1}

    def test_is_immutable(self):
        context = ObservationContext()

        with pytest.raises(dataclasses.FrozenInstanceError):
            context.request_id = "other"  # type: ignore[misc]
