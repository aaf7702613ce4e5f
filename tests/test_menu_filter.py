from app.dashtact.services.menu_filter import (
    FeatureFlag,
    FeatureSettings,
    MenuItem,
    build_hierarchy,
    cascade_visibility,
    count_nodes,
    filter_by_feature_flags,
    filter_by_permission,
    filter_by_role,
    resolve_menu,
    sort_by_order,
)


def _ids(items):
    return [item.id for item in items]


def test_filter_by_role_keeps_unrestricted_items():
    menus = [
        MenuItem(id="1", label="Menu 1", required_roles=[]),
        MenuItem(id="2", label="Menu 2", required_roles=None),
        MenuItem(id="3", label="Menu 3"),
    ]

    assert _ids(filter_by_role(menus, ["USER"])) == ["1", "2", "3"]


def test_filter_by_role_matches_any_required_role():
    menus = [
        MenuItem(id="1", label="Admin Menu", required_roles=["ADMIN"]),
        MenuItem(id="2", label="User Menu", required_roles=["USER"]),
        MenuItem(id="3", label="Shared Menu", required_roles=["ADMIN", "MANAGER"]),
        MenuItem(id="4", label="Public Menu"),
    ]

    assert _ids(filter_by_role(menus, ["MANAGER"])) == ["3", "4"]
    assert _ids(filter_by_role(menus, ["USER"])) == ["2", "4"]


def test_filter_by_role_with_no_roles_keeps_only_unrestricted():
    menus = [
        MenuItem(id="1", required_roles=["ADMIN"]),
        MenuItem(id="2"),
        MenuItem(id="3", required_roles=["USER"]),
    ]

    assert _ids(filter_by_role(menus, [])) == ["2"]


def test_filter_by_role_preserves_identity_and_input():
    first = MenuItem(id="1")
    menus = [first, MenuItem(id="2", required_roles=["ADMIN"])]

    result = filter_by_role(menus, ["USER"])

    assert result[0] is first
    assert len(menus) == 2


def test_filter_by_permission_requires_all_permissions():
    menus = [MenuItem(id="1", required_permissions=["read", "write", "delete"])]

    assert filter_by_permission(menus, ["read", "write"]) == []
    assert _ids(filter_by_permission(menus, ["read", "write", "delete"])) == ["1"]


def test_filter_by_permission_keeps_unrestricted_items():
    menus = [
        MenuItem(id="1", required_permissions=[]),
        MenuItem(id="2", required_permissions=None),
        MenuItem(id="3", required_permissions=["admin:write"]),
    ]

    assert _ids(filter_by_permission(menus, ["read"])) == ["1", "2"]


def test_filter_by_permission_wildcard_passes_everything():
    menus = [
        MenuItem(id="1", required_permissions=["orders:read"]),
        MenuItem(id="2", required_permissions=["orders:read", "orders:write"]),
        MenuItem(id="3"),
    ]

    assert filter_by_permission(menus, ["*:*"]) == menus


def test_roles_are_any_of_while_permissions_are_all_of():
    role_item = MenuItem(id="roles", required_roles=["Admin", "Manager"])
    permission_item = MenuItem(id="perms", required_permissions=["read", "write"])

    assert filter_by_role([role_item], ["Manager"]) == [role_item]
    assert filter_by_permission([permission_item], ["read"]) == []
    assert filter_by_permission([permission_item], ["read", "write"]) == [permission_item]


def test_feature_flags_without_settings_fail_closed():
    menus = [
        MenuItem(id="1", feature_flag="ecommerce_enabled"),
        MenuItem(id="2", feature_flag=None),
        MenuItem(id="3", feature_flag="unknown_flag"),
        MenuItem(id="4"),
    ]

    assert _ids(filter_by_feature_flags(menus, None)) == ["2", "4"]


def test_feature_flags_empty_string_counts_as_no_flag():
    menus = [MenuItem(id="1", feature_flag="")]

    assert _ids(filter_by_feature_flags(menus, None)) == ["1"]


def test_ecommerce_and_blog_flags_pass_when_settings_exist():
    menus = [
        MenuItem(id="1", feature_flag="ecommerce"),
        MenuItem(id="2", feature_flag="ecommerce_enabled"),
        MenuItem(id="3", feature_flag="blog"),
    ]

    assert _ids(filter_by_feature_flags(menus, FeatureSettings())) == ["1", "2", "3"]


def test_inventory_flag_follows_track_inventory():
    menus = [MenuItem(id="1", feature_flag="inventory_enabled")]

    assert filter_by_feature_flags(menus, FeatureSettings(track_inventory=False)) == []
    assert _ids(filter_by_feature_flags(menus, FeatureSettings(track_inventory=True))) == ["1"]


def test_shipping_cod_and_portal_flags_follow_settings():
    shipping = MenuItem(id="shipping", feature_flag=FeatureFlag.SHIPPING_ENABLED.value)
    cod = MenuItem(id="cod", feature_flag=FeatureFlag.COD_ENABLED.value)
    portal = MenuItem(id="portal", feature_flag=FeatureFlag.PORTAL_ENABLED.value)
    menus = [shipping, cod, portal]

    assert filter_by_feature_flags(menus, FeatureSettings()) == []
    assert filter_by_feature_flags(menus, FeatureSettings(shipping_enabled=True)) == [shipping]
    assert filter_by_feature_flags(menus, FeatureSettings(cod_enabled=True)) == [cod]
    assert filter_by_feature_flags(menus, FeatureSettings(portal_enabled=True)) == [portal]


def test_unknown_flag_passes_when_settings_exist():
    menus = [MenuItem(id="1", feature_flag="unknown_flag")]

    assert _ids(filter_by_feature_flags(menus, FeatureSettings(track_inventory=True))) == ["1"]


def test_sort_by_order_is_stable_and_does_not_mutate():
    menus = [
        MenuItem(id="1", order=3),
        MenuItem(id="2", order=1),
        MenuItem(id="3", order=1),
    ]

    result = sort_by_order(menus)

    assert _ids(result) == ["2", "3", "1"]
    assert _ids(menus) == ["1", "2", "3"]
    assert sort_by_order([]) == []


def test_build_hierarchy_empty():
    assert build_hierarchy([]) == []


def test_build_hierarchy_sorts_children_by_order():
    menus = [
        MenuItem(id="1", parent_id=None, order=1),
        MenuItem(id="2", parent_id="1", order=2),
        MenuItem(id="3", parent_id="1", order=1),
    ]

    roots = build_hierarchy(menus)

    assert [node.id for node in roots] == ["1"]
    assert [child.id for child in roots[0].children] == ["3", "2"]


def test_build_hierarchy_nested_levels_and_multiple_roots():
    menus = [
        MenuItem(id="3", parent_id="2", order=1),
        MenuItem(id="root-b", order=2),
        MenuItem(id="2", parent_id="1", order=1),
        MenuItem(id="1", order=1),
    ]

    roots = build_hierarchy(menus)

    assert [node.id for node in roots] == ["1", "root-b"]
    assert roots[0].children[0].id == "2"
    assert roots[0].children[0].children[0].id == "3"
    assert roots[1].children == []


def test_build_hierarchy_keeps_input_order_for_equal_order_siblings():
    menus = [
        MenuItem(id="p", order=0),
        MenuItem(id="b", parent_id="p", order=5),
        MenuItem(id="a", parent_id="p", order=5),
        MenuItem(id="c", parent_id="p", order=1),
    ]

    roots = build_hierarchy(menus)

    assert [child.id for child in roots[0].children] == ["c", "b", "a"]


def test_build_hierarchy_treats_dangling_parent_as_root():
    menus = [
        MenuItem(id="1", parent_id="non-existent", order=1),
        MenuItem(id="2", parent_id=None, order=2),
    ]

    roots = build_hierarchy(menus)

    assert [node.id for node in roots] == ["1", "2"]


def test_build_hierarchy_self_parent_becomes_root():
    roots = build_hierarchy([MenuItem(id="1", parent_id="1")])

    assert [node.id for node in roots] == ["1"]
    assert roots[0].children == []


def test_build_hierarchy_drops_parent_cycles_without_recursing():
    menus = [
        MenuItem(id="root"),
        MenuItem(id="a", parent_id="b"),
        MenuItem(id="b", parent_id="a"),
    ]

    roots = build_hierarchy(menus)

    assert [node.id for node in roots] == ["root"]


def test_resolved_node_to_dict_is_recursive():
    roots = build_hierarchy(
        [
            MenuItem(id="1", label="Parent", required_roles=["ADMIN"]),
            MenuItem(id="2", label="Child", parent_id="1"),
        ]
    )

    payload = roots[0].to_dict()

    assert payload["label"] == "Parent"
    assert payload["required_roles"] == ["ADMIN"]
    assert payload["children"][0]["id"] == "2"
    assert payload["children"][0]["children"] == []


def test_cascade_visibility_hides_children_of_hidden_parent():
    menus = [
        MenuItem(id="1", parent_id=None),
        MenuItem(id="2", parent_id="1"),
    ]

    assert cascade_visibility(menus, {"2"}) == []
    assert _ids(cascade_visibility(menus, {"1", "2"})) == ["1", "2"]


def test_cascade_visibility_nested_hierarchy():
    menus = [
        MenuItem(id="1"),
        MenuItem(id="2", parent_id="1"),
        MenuItem(id="3", parent_id="2"),
    ]

    assert _ids(cascade_visibility(menus, {"1", "3"})) == ["1"]


def test_cascade_visibility_roots_follow_their_own_visibility():
    menus = [MenuItem(id="1"), MenuItem(id="2")]

    assert _ids(cascade_visibility(menus, {"1", "2"})) == ["1", "2"]
    assert _ids(cascade_visibility(menus, {"2"})) == ["2"]


def test_cascade_visibility_ignores_dangling_parent():
    menus = [MenuItem(id="orphan", parent_id="missing")]

    assert _ids(cascade_visibility(menus, {"orphan"})) == ["orphan"]


def test_cascade_visibility_hides_parent_cycles():
    menus = [
        MenuItem(id="a", parent_id="b"),
        MenuItem(id="b", parent_id="a"),
        MenuItem(id="c"),
    ]

    assert _ids(cascade_visibility(menus, {"a", "b", "c"})) == ["c"]


def test_filters_commute():
    settings = FeatureSettings(track_inventory=True)
    menus = [
        MenuItem(id="1", required_roles=["ADMIN"], required_permissions=["orders:read"]),
        MenuItem(id="2", required_permissions=["orders:read", "orders:write"]),
        MenuItem(id="3", feature_flag="inventory_enabled"),
        MenuItem(id="4", feature_flag="shipping_enabled", required_roles=["USER"]),
        MenuItem(id="5", required_roles=["USER"]),
        MenuItem(id="6"),
    ]
    roles = ["USER"]
    permissions = ["orders:read"]

    forward = filter_by_feature_flags(filter_by_permission(filter_by_role(menus, roles), permissions), settings)
    backward = filter_by_role(filter_by_permission(filter_by_feature_flags(menus, settings), permissions), roles)
    mixed = filter_by_permission(filter_by_feature_flags(filter_by_role(menus, roles), settings), permissions)

    assert _ids(forward) == _ids(backward) == _ids(mixed) == ["3", "5", "6"]


def test_resolve_menu_runs_full_pipeline():
    menus = [
        MenuItem(id="settings", order=100, required_permissions=["settings:read"]),
        MenuItem(id="dashboard", order=1, required_roles=["ADMIN"]),
        MenuItem(id="ecommerce", order=30, feature_flag="ecommerce"),
        MenuItem(id="inventory", order=2, parent_id="ecommerce", feature_flag="inventory_enabled"),
        MenuItem(id="products", order=1, parent_id="ecommerce", required_permissions=["products:read"]),
    ]

    tree = resolve_menu(
        menus,
        user_roles=["MANAGER"],
        user_permissions=["products:read", "settings:read"],
        settings=FeatureSettings(track_inventory=True),
    )

    assert [node.id for node in tree] == ["ecommerce", "settings"]
    assert [child.id for child in tree[0].children] == ["products", "inventory"]


def test_resolve_menu_without_settings_surfaces_unflagged_children():
    menus = [
        MenuItem(id="ecommerce", order=1, feature_flag="ecommerce"),
        MenuItem(id="products", order=1, parent_id="ecommerce"),
    ]

    tree = resolve_menu(menus, user_roles=["ADMIN"], user_permissions=["*:*"], settings=None)

    # The child has no flag of its own, so it surfaces as a root once its parent is filtered out.
    assert [node.id for node in tree] == ["products"]


def _chain(depth):
    return [MenuItem(id=str(level), parent_id=str(level - 1) if level else None) for level in range(depth)]


def test_build_hierarchy_handles_chains_deeper_than_recursion_limit():
    tree = build_hierarchy(_chain(1200))

    assert len(tree) == 1
    assert count_nodes(tree) == 1200
    node, depth = tree[0], 1
    while node.children:
        (node,) = node.children
        depth += 1
    assert depth == 1200
    assert node.id == "1199"


def test_deep_chain_renders_and_cascades():
    items = _chain(1200)
    tree = build_hierarchy(items)

    payload = tree[0].to_dict()
    for _ in range(1199):
        (payload,) = payload["children"]
    assert payload["id"] == "1199"
    assert payload["children"] == []

    visible = {item.id for item in items} - {"600"}
    assert _ids(cascade_visibility(items, visible)) == [str(level) for level in range(600)]
