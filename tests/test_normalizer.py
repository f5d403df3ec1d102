"""
tests.test_normalizer

Claim normalization and profile/claims merging.
"""

from __future__ import annotations

import pytest

from identity_gate.auth.normalizer import (
    dedupe,
    is_namespaced,
    merge_profile_claims,
    normalize_claims,
    strip_namespace,
)


def test_namespace_detection() -> None:
    assert is_namespaced("https://ns.example.com/roles")
    assert is_namespaced("http://ns/app/permissions")
    assert not is_namespaced("roles")
    assert not is_namespaced("https://ns/")
    assert strip_namespace("https://ns.example.com/app/roles") == "roles"


def test_same_attribute_from_two_namespaces_is_unioned_in_order() -> None:
    out = normalize_claims({"https://a/roles": ["a", "b"], "https://b/roles": ["b", "c"]})
    assert out == {"roles": ["a", "b", "c"]}


def test_permissions_scenario() -> None:
    claims = {
        "sub": "auth0|1",
        "https://ns/permissions": ["read"],
        "https://ns2/permissions": ["read", "write"],
    }
    assert normalize_claims(claims) == {"sub": "auth0|1", "permissions": ["read", "write"]}


def test_namespaced_key_merges_into_plain_key() -> None:
    out = normalize_claims({"https://ns/roles": ["admin", "user"], "roles": ["user"]})
    # Plain values seed the list even when the namespaced key comes first.
    assert out["roles"] == ["user", "admin"]


def test_scalar_values_collapse_only_when_equal() -> None:
    same = normalize_claims({"https://a/email": "x@example.com", "https://b/email": "x@example.com"})
    assert same["email"] == "x@example.com"

    different = normalize_claims({"https://a/email": "x@example.com", "https://b/email": "y@example.com"})
    assert different["email"] == ["x@example.com", "y@example.com"]


def test_attribute_with_one_distinct_value_becomes_scalar() -> None:
    assert normalize_claims({"https://ns/roles": ["admin"]}) == {"roles": "admin"}
    out = normalize_claims({"https://a/roles": ["admin"], "https://b/roles": ["admin"], "roles": "admin"})
    assert out == {"roles": "admin"}


def test_empty_list_stays_a_list() -> None:
    assert normalize_claims({"https://ns/roles": []}) == {"roles": []}


def test_booleans_and_integers_are_not_merged() -> None:
    out = normalize_claims({"https://a/flags": [1, True], "https://b/flags": [0, False, 1]})
    assert out["flags"] == [1, True, 0, False]
    assert [type(v) for v in out["flags"]] == [int, bool, int, bool]

    assert dedupe([True, 1, 1.0, "1"]) == [True, 1, 1.0, "1"]


def test_single_namespaced_id_becomes_scalar() -> None:
    out = normalize_claims({"sub": "auth0|1", "https://ns/id": "abc"})
    assert out["id"] == "abc"
    assert "ids" not in out


def test_multiple_namespaced_ids_are_kept() -> None:
    out = normalize_claims({"https://a/id": "abc", "https://b/id": "def", "https://c/id": "abc"})
    assert set(out["ids"]) == {"abc", "def"}
    assert len(out["ids"]) == 2
    assert out["id"] == "abc"


def test_no_ids_adds_no_id_fields() -> None:
    out = normalize_claims({"sub": "auth0|1", "name": "Ada"})
    assert "id" not in out
    assert "ids" not in out


@pytest.mark.parametrize(("precedence", "expected_id"), [(True, "plain"), (False, "ns")])
def test_plain_id_precedence(precedence: bool, expected_id: str) -> None:
    out = normalize_claims({"id": "plain", "https://ns/id": "ns"}, plain_id_precedence=precedence)
    assert out == {"id": expected_id}


@pytest.mark.parametrize(("precedence", "expected_id"), [(True, "plain"), (False, "a")])
def test_plain_id_is_never_listed_in_ids(precedence: bool, expected_id: str) -> None:
    out = normalize_claims(
        {"id": "plain", "https://x/id": "a", "https://y/id": "b"},
        plain_id_precedence=precedence,
    )
    assert out == {"ids": ["a", "b"], "id": expected_id}


def test_plain_id_alone_is_kept_without_precedence() -> None:
    assert normalize_claims({"id": "plain"}, plain_id_precedence=False) == {"id": "plain"}


def test_plain_ids_list_contributes_candidates() -> None:
    out = normalize_claims({"ids": ["a"], "https://ns/id": "b"})
    assert out == {"ids": ["a", "b"], "id": "a"}


def test_plain_id_matching_namespaced_id_collapses() -> None:
    assert normalize_claims({"id": "abc", "https://ns/id": "abc"}) == {"id": "abc"}


@pytest.mark.parametrize(
    "claims",
    [
        {"sub": "auth0|1", "https://ns/permissions": ["read"], "https://ns2/permissions": ["read", "write"]},
        {"https://a/id": "abc", "https://b/id": "def", "id": "xyz"},
        {"https://a/email": "x@example.com", "https://b/email": "y@example.com", "name": "Ada"},
        {"roles": "admin", "https://ns/roles": "admin", "https://ns/user_metadata": {"theme": "dark"}},
    ],
)
def test_normalization_is_idempotent(claims: dict) -> None:
    once = normalize_claims(claims)
    assert normalize_claims(once) == once


def test_input_is_not_mutated() -> None:
    claims = {"https://ns/roles": ["a"], "roles": ["b"]}
    normalize_claims(claims)
    assert claims == {"https://ns/roles": ["a"], "roles": ["b"]}


def test_unhashable_values_are_deduplicated() -> None:
    meta = {"theme": "dark"}
    out = normalize_claims({"https://a/user_metadata": meta, "https://b/user_metadata": dict(meta)})
    assert out["user_metadata"] == meta


def test_merge_union_policy_fills_gaps_and_unions_lists() -> None:
    profile = {"sub": "auth0|1", "email": "p@example.com", "https://ns/roles": ["user"]}
    claims = {
        "sub": "auth0|1",
        "email": "c@example.com",
        "https://ns/roles": ["admin", "user"],
        "permissions": ["read"],
        "iss": "https://tenant.example.com/",
        "exp": 1,
    }
    merged = merge_profile_claims(profile, claims)
    assert merged == {
        "sub": "auth0|1",
        "email": "p@example.com",
        "https://ns/roles": ["user", "admin"],
        "permissions": ["read"],
    }


def test_merge_profile_policy_keeps_profile_values() -> None:
    merged = merge_profile_claims(
        {"roles": ["user"]}, {"roles": ["admin"], "name": "Ada"}, policy="profile"
    )
    assert merged == {"roles": ["user"], "name": "Ada"}


def test_merge_claims_policy_prefers_claims() -> None:
    merged = merge_profile_claims(
        {"email": "p@example.com", "roles": ["user"]},
        {"email": "c@example.com", "roles": ["admin"]},
        policy="claims",
    )
    assert merged == {"email": "c@example.com", "roles": ["admin", "user"]}
