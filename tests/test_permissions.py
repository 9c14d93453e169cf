"""Tests for alias tables and permission-tuple derivation."""

from __future__ import annotations

import pytest

from routegate.authz.aliases import DEFAULT_ACTION_ALIASES, merge_aliases
from routegate.authz.permissions import (
    PermissionTuple,
    RouteMetadata,
    derive_permission,
    raw_action,
    resource_from_binding,
)
from routegate.errors import DependencyFailure, MalformedRouteError


def _derive(handler_name: str, resource_name: str = "", aliases=DEFAULT_ACTION_ALIASES):
    return derive_permission(
        RouteMetadata(handler_name=handler_name, resource_name=resource_name), aliases
    )


# ── Alias tables ─────────────────────────────────────────────────────────


class TestDefaultAliases:
    def test_contents(self):
        assert dict(DEFAULT_ACTION_ALIASES) == {
            "new": "create",
            "edit": "update",
            "destroy": "delete",
        }

    def test_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_ACTION_ALIASES["new"] = "make"  # type: ignore[index]


class TestMergeAliases:
    def test_override_wins_and_new_keys_added(self):
        merged = merge_aliases({"edit": "update"}, {"edit": "modify", "archive": "delete"})
        assert dict(merged) == {"edit": "modify", "archive": "delete"}

    def test_defaults_survive(self):
        merged = merge_aliases(DEFAULT_ACTION_ALIASES, {"edit": "modify"})
        assert merged["new"] == "create"
        assert merged["destroy"] == "delete"
        assert merged["edit"] == "modify"

    def test_inputs_untouched(self):
        base = {"edit": "update"}
        overrides = {"edit": "modify"}
        merge_aliases(base, overrides)
        assert base == {"edit": "update"}
        assert overrides == {"edit": "modify"}
        assert DEFAULT_ACTION_ALIASES["edit"] == "update"

    def test_no_overrides(self):
        assert dict(merge_aliases(DEFAULT_ACTION_ALIASES, None)) == dict(DEFAULT_ACTION_ALIASES)

    def test_result_read_only(self):
        merged = merge_aliases(DEFAULT_ACTION_ALIASES, {})
        with pytest.raises(TypeError):
            merged["x"] = "y"  # type: ignore[index]


# ── Helpers ──────────────────────────────────────────────────────────────


class TestResourceFromBinding:
    def test_marker_suffix(self):
        assert resource_from_binding("WidgetsResource") == "widgets"

    def test_text_before_first_marker(self):
        assert resource_from_binding("WidgetResourceFoo") == "widget"

    def test_multiple_markers(self):
        assert resource_from_binding("AdminResourceUsersResource") == "admin"

    def test_no_marker(self):
        assert resource_from_binding("Widgets") == "widgets"


class TestRawAction:
    def test_last_segment_after_separator(self):
        assert raw_action("app/actions.Widgets.Create") == "widgets.create"

    def test_repeated_separator_uses_last(self):
        assert raw_action("a/actions.b/actions.Home") == "home"

    def test_no_separator_uses_whole_identifier(self):
        assert raw_action("Widgets.Create") == "widgets.create"


# ── derive_permission ────────────────────────────────────────────────────


class TestDerivePermission:
    def test_dotted_handler_without_binding(self):
        assert _derive("app/actions.Widgets.Create") == PermissionTuple("widgets", "create")

    def test_dotted_alias_applied(self):
        assert _derive("app/actions.Widgets.New") == PermissionTuple("widgets", "create")
        assert _derive("app/actions.Widgets.Edit") == PermissionTuple("widgets", "update")
        assert _derive("app/actions.Widgets.Destroy") == PermissionTuple("widgets", "delete")

    def test_bare_action_is_not_aliased(self):
        # Aliases only apply to the resource.action form; a bare "new" stays "new".
        assert _derive("app/actions.New") == PermissionTuple("", "new")

    def test_bare_action_without_resource(self):
        perm = _derive("app/actions.HomeHandler")
        assert perm.resource == ""
        assert perm.action == "homehandler"

    def test_binding_names_resource(self):
        perm = _derive("app/actions.WidgetsResource.List", resource_name="WidgetsResource")
        assert perm == PermissionTuple("widgets", "list")

    def test_binding_with_trailing_text(self):
        perm = _derive("app/actions.WidgetResourceFoo.Show", resource_name="WidgetResourceFoo")
        assert perm == PermissionTuple("widget", "show")

    def test_binding_wins_over_handler_resource(self):
        perm = _derive("app/actions.Widgets.Edit", resource_name="UsersResource")
        assert perm == PermissionTuple("users", "update")

    def test_binding_with_bare_action(self):
        perm = _derive("app/actions.Index", resource_name="UsersResource")
        assert perm == PermissionTuple("users", "index")

    def test_no_separator(self):
        assert _derive("Widgets.Edit") == PermissionTuple("widgets", "update")
        assert _derive("home") == PermissionTuple("", "home")

    def test_more_than_two_parts_uses_first_and_last(self):
        assert _derive("app/actions.Admin.Widgets.Destroy") == PermissionTuple("admin", "delete")

    def test_custom_aliases(self):
        aliases = merge_aliases(DEFAULT_ACTION_ALIASES, {"archive": "delete", "edit": "modify"})
        assert _derive("app/actions.Widgets.Archive", aliases=aliases).action == "delete"
        assert _derive("app/actions.Widgets.Edit", aliases=aliases).action == "modify"
        assert _derive("app/actions.Widgets.New", aliases=aliases).action == "create"

    def test_alias_lookup_is_case_sensitive(self):
        perm = _derive("app/actions.Widgets.New", aliases={"NEW": "create"})
        assert perm.action == "new"

    def test_unpacks(self):
        resource, action = _derive("app/actions.Widgets.Show")
        assert (resource, action) == ("widgets", "show")


class TestMalformedRoutes:
    @pytest.mark.parametrize("handler_name", ["", "   ", "app/actions.", "app/actions.widgets."])
    def test_fails_closed(self, handler_name):
        route = RouteMetadata(handler_name=handler_name)
        with pytest.raises(MalformedRouteError) as exc_info:
            derive_permission(route)
        assert exc_info.value.route is route
        assert exc_info.value.kind == "route"

    def test_is_dependency_failure(self):
        with pytest.raises(DependencyFailure):
            derive_permission(RouteMetadata(handler_name=""))
