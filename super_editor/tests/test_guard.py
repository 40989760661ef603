import logging

from super_editor.auth import DO_NOT_ALLOW, Role
from super_editor.guard import absint, is_denied, map_meta_capability

ROLES = {
    1: Role.ADMINISTRATOR,
    5: Role.EDITOR,
    9: Role.ADMINISTRATOR,
    12: Role.AUTHOR,
}


def lookup(actor_id):
    return ROLES.get(actor_id)


def can(*caps):
    return lambda name: name in caps


def check(requested_cap, actor_id, args, caps=("edit_users",), current_actor_can=None):
    return map_meta_capability(
        list(caps),
        requested_cap,
        actor_id,
        args,
        role_lookup=lookup,
        current_actor_can=current_actor_can or can(),
    )


def test_self_edit_is_allowed():
    assert check("edit_user", 5, [5]) == ["edit_users"]


def test_self_edit_of_administrator_without_manage_options_is_allowed():
    assert not is_denied(check("edit_user", 9, [9]))


def test_missing_target_is_denied():
    result = check("edit_user", 5, [])

    assert DO_NOT_ALLOW in result
    assert result.count(DO_NOT_ALLOW) == 1


def test_remove_and_promote_without_target_are_denied():
    assert is_denied(check("remove_user", 5, []))
    assert is_denied(check("promote_user", 5, []))


def test_editing_administrator_without_manage_options_is_denied():
    assert is_denied(check("edit_user", 5, [9]))
    assert is_denied(check("remove_user", 5, [9]))
    assert is_denied(check("promote_user", 5, [9]))


def test_editing_administrator_with_manage_options_is_allowed():
    assert not is_denied(check("edit_user", 1, [9], current_actor_can=can("manage_options")))


def test_editing_non_administrator_is_allowed():
    assert check("edit_user", 5, [12]) == ["edit_users"]


def test_delete_administrator_without_manage_options_is_denied():
    assert is_denied(check("delete_user", 5, [9], caps=["delete_users"]))
    assert is_denied(check("delete_users", 5, [9], caps=["delete_users"]))


def test_delete_administrator_with_manage_options_is_allowed():
    result = check("delete_user", 5, [9], caps=["delete_users"], current_actor_can=can("manage_options"))

    assert result == ["delete_users"]


def test_delete_without_target_is_left_to_other_layers():
    assert check("delete_users", 5, [], caps=["delete_users"]) == ["delete_users"]
    assert check("delete_user", 5, [], caps=["delete_users"]) == ["delete_users"]


def test_unknown_target_fails_open(caplog):
    with caplog.at_level(logging.WARNING, logger="super_editor.guard"):
        result = check("delete_user", 5, [404], caps=["delete_users"])

    assert not is_denied(result)
    assert "could not be resolved" in caplog.text


def test_malformed_target_resolves_to_no_role():
    assert not is_denied(check("edit_user", 5, ["not-a-number"]))
    assert not is_denied(check("edit_user", 5, [float("inf")]))
    assert not is_denied(check("delete_user", 5, [float("nan")], caps=["delete_users"]))


def test_none_target_counts_as_missing():
    assert is_denied(check("edit_user", 5, [None]))
    assert not is_denied(check("delete_user", 5, [None], caps=["delete_users"]))


def test_oversized_target_resolves_to_no_role():
    assert not is_denied(check("delete_user", 5, [10 ** 20], caps=["delete_users"]))


def test_string_target_is_coerced_for_lookup():
    assert is_denied(check("delete_user", 5, ["9"], caps=["delete_users"]))


def test_other_capabilities_pass_through():
    def exploding_lookup(actor_id):
        raise AssertionError("role lookup must not run")

    result = map_meta_capability(
        ["edit_posts"],
        "edit_post",
        5,
        [9],
        role_lookup=exploding_lookup,
        current_actor_can=can(),
    )

    assert result == ["edit_posts"]


def test_input_list_is_not_mutated():
    caps = ["edit_users"]

    result = map_meta_capability(caps, "edit_user", 5, [9], role_lookup=lookup, current_actor_can=can())

    assert is_denied(result)
    assert caps == ["edit_users"]


def test_absint():
    assert absint(7) == 7
    assert absint("-7") == 7
    assert absint("abc") == 0
    assert absint(None) == 0
    assert absint(float("inf")) == 0
    assert absint(10 ** 20) == 10 ** 20
