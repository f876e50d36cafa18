"""Unit tests for projects domain value objects."""

from __future__ import annotations

import pytest

from projects.domain.value_objects import (
    DependentResource,
    Grant,
    GrantCollection,
    GrantDiff,
    ProjectId,
    ProjectSettings,
)


class TestProjectId:
    """Tests for ProjectId."""

    def test_from_string_accepts_object_id(self):
        project_id = ProjectId.from_string("5f1a2b3c4d5e6f7a8b9c0d1e")

        assert project_id.value == "5f1a2b3c4d5e6f7a8b9c0d1e"
        assert str(project_id) == "5f1a2b3c4d5e6f7a8b9c0d1e"

    @pytest.mark.parametrize(
        "value",
        ["", "not-an-id", "5f1a2b3c4d5e6f7a8b9c0d1", "5f1a2b3c4d5e6f7a8b9c0d1z"],
    )
    def test_from_string_rejects_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid ProjectId"):
            ProjectId.from_string(value)

    def test_equality_by_value(self):
        assert ProjectId("5f1a2b3c4d5e6f7a8b9c0d1e") == ProjectId("5f1a2b3c4d5e6f7a8b9c0d1e")


class TestGrant:
    """Tests for Grant."""

    def test_roles_are_coerced_to_frozenset(self):
        grant = Grant("team-1", ["GROUP_OWNER", "GROUP_READ_ONLY"])  # type: ignore[arg-type]

        assert grant.roles == frozenset({"GROUP_OWNER", "GROUP_READ_ONLY"})

    def test_empty_identity_is_rejected(self):
        with pytest.raises(ValueError, match="non-empty"):
            Grant("", frozenset())

    def test_sorted_roles(self):
        grant = Grant("team-1", frozenset({"b", "a"}))

        assert grant.sorted_roles() == ["a", "b"]

    def test_equality_is_whole_record(self):
        assert Grant("t", frozenset({"a"})) != Grant("t", frozenset({"b"}))


class TestGrantCollection:
    """Tests for GrantCollection."""

    def test_duplicate_identity_is_rejected(self):
        with pytest.raises(ValueError, match="Duplicate grant identity"):
            GrantCollection([Grant("t", frozenset()), Grant("t", frozenset({"a"}))])

    def test_iteration_is_sorted_by_identity(self):
        collection = GrantCollection.from_mapping({"b": ["r"], "a": ["r"]})

        assert [grant.identity for grant in collection] == ["a", "b"]

    def test_membership_and_lookup(self):
        collection = GrantCollection.from_mapping({"a": ["r1"]})

        assert "a" in collection
        assert "b" not in collection
        assert collection.get("a") == Grant("a", frozenset({"r1"}))
        assert collection.get("b") is None

    def test_equality_ignores_construction_order(self):
        first = GrantCollection.from_mapping({"a": ["r1"], "b": ["r2"]})
        second = GrantCollection.from_mapping({"b": ["r2"], "a": ["r1"]})

        assert first == second
        assert hash(first) == hash(second)

    def test_empty_collection_is_falsy(self):
        assert not GrantCollection()
        assert len(GrantCollection()) == 0

    def test_mapping_view_is_read_only(self):
        collection = GrantCollection.from_mapping({"a": ["r1"]})

        with pytest.raises(TypeError):
            collection.as_mapping()["b"] = frozenset()  # type: ignore[index]


class TestGrantDiff:
    """Tests for GrantDiff."""

    def test_default_is_empty(self):
        assert GrantDiff().is_empty

    def test_any_bucket_makes_it_non_empty(self):
        diff = GrantDiff(removed=GrantCollection.from_mapping({"a": []}))

        assert not diff.is_empty


class TestProjectSettings:
    """Tests for ProjectSettings."""

    def test_defaults_are_all_enabled(self):
        settings = ProjectSettings()

        assert all(getattr(settings, name) for name in ProjectSettings.field_names())
        assert len(ProjectSettings.field_names()) == 5

    def test_overlay_replaces_only_given_flags(self):
        settings = ProjectSettings().overlay(is_data_explorer_enabled=False)

        assert settings.is_data_explorer_enabled is False
        assert settings.is_schema_advisor_enabled is True

    def test_overlay_rejects_unknown_flag(self):
        with pytest.raises(ValueError, match="Unknown project settings"):
            ProjectSettings().overlay(is_chat_enabled=False)

    def test_changed_fields_reports_new_values(self):
        current = ProjectSettings()
        target = current.overlay(
            is_data_explorer_enabled=False,
            is_schema_advisor_enabled=True,
        )

        assert current.changed_fields(target) == {"is_data_explorer_enabled": False}

    def test_changed_fields_empty_for_equal_snapshots(self):
        assert ProjectSettings().changed_fields(ProjectSettings()) == {}


class TestDependentResource:
    """Tests for DependentResource."""

    @pytest.mark.parametrize(
        ("status", "deleting"),
        [("DELETING", True), ("deleting", True), ("IDLE", False), ("CREATING", False)],
    )
    def test_is_deleting(self, status, deleting):
        assert DependentResource(name="c", status=status).is_deleting is deleting
