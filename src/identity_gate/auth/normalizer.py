"""
identity_gate.auth.normalizer

Claim normalization: namespaced identity-provider claims -> canonical identity record.

Responsibilities:
- Strip URL namespaces from claim names (`https://ns/roles` -> `roles`).
- Union values contributed by every namespace, deduplicated in first-seen order.
- Resolve the `id` / `ids` identifier fields.
- Merge a `/userinfo` profile with token claims under a configurable policy.

Everything here is pure: no I/O, inputs are never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from identity_gate.settings import ClaimMergePolicy

_SCHEME_MARKER = "://"

# Registered JWT claims describe the token, not the user; they never enter the identity.
TOKEN_ONLY_CLAIMS = frozenset({"iss", "aud", "exp", "iat", "nbf", "azp", "jti", "gty", "scope"})


def is_namespaced(key: str) -> bool:
    return _SCHEME_MARKER in key and bool(strip_namespace(key))


def strip_namespace(key: str) -> str:
    return key.rsplit("/", 1)[-1]


def _same(a: Any, b: Any) -> bool:
    # Type must match too: 1 == True and 0 == False under plain equality.
    return type(a) is type(b) and a == b


def dedupe(values: Iterable[Any]) -> list[Any]:
    # Equality based so unhashable values (dicts, lists) survive.
    out: list[Any] = []
    for value in values:
        if not any(_same(seen, value) for seen in out):
            out.append(value)
    return out


def _expand(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _collapse(values: list[Any]) -> Any:
    values = dedupe(values)
    if len(values) == 1:
        return values[0]
    return values


def normalize_claims(
    data: Mapping[str, Any],
    *,
    plain_id_precedence: bool = True,
) -> dict[str, Any]:
    """
    Flatten namespaced claims into a canonical identity record.

    Plain keys seed each attribute before namespaced keys contribute, so a namespaced
    `https://ns/roles` unions into a plain `roles` instead of replacing it. Any attribute
    that dedupes to exactly one value is returned as that scalar.

    Identifier handling: namespaced `id` values and a plain `ids` list are the candidates;
    `ids` is emitted only when more than one distinct candidate exists. A plain `id` is
    never a candidate. It becomes `id` when `plain_id_precedence` is set (or when there
    are no candidates); otherwise `id` is the first candidate.
    """

    plain: list[tuple[str, Any]] = []
    namespaced: list[tuple[str, Any]] = []
    for key, value in data.items():
        if is_namespaced(key):
            namespaced.append((strip_namespace(key), value))
        else:
            plain.append((key, value))

    attributes: dict[str, list[Any]] = {}
    candidates: list[Any] = []
    plain_id: list[Any] = []

    for key, value in plain:
        if key == "id":
            plain_id = _expand(value)
        elif key == "ids":
            candidates.extend(_expand(value))
        else:
            attributes.setdefault(key, []).extend(_expand(value))

    for key, value in namespaced:
        if key in ("id", "ids"):
            candidates.extend(_expand(value))
        else:
            attributes.setdefault(key, []).extend(_expand(value))

    result: dict[str, Any] = {key: _collapse(values) for key, values in attributes.items()}

    ids = dedupe(candidates)
    if len(ids) > 1:
        result["ids"] = ids
    if plain_id and (plain_id_precedence or not ids):
        result["id"] = plain_id[0]
    elif ids:
        result["id"] = ids[0]
    return result


def _union_into(target: dict[str, Any], key: str, first: Any, second: Any) -> None:
    if isinstance(first, (list, tuple)) or isinstance(second, (list, tuple)):
        target[key] = dedupe(_expand(first) + _expand(second))
    else:
        target[key] = first


def merge_profile_claims(
    profile: Mapping[str, Any],
    claims: Mapping[str, Any],
    *,
    policy: ClaimMergePolicy = "union",
) -> dict[str, Any]:
    """
    Combine a `/userinfo` profile with the token claims of the same subject.

    - union: profile scalars win, claims fill gaps, lists from both are unioned.
    - profile: profile values win outright, claims only fill gaps.
    - claims: claim scalars win, lists from both are unioned (claims first).
    """

    merged: dict[str, Any] = dict(profile)
    for key, value in claims.items():
        if key in TOKEN_ONLY_CLAIMS:
            continue
        if key not in merged:
            merged[key] = value
        elif policy == "union":
            _union_into(merged, key, merged[key], value)
        elif policy == "claims":
            _union_into(merged, key, value, merged[key])
    return merged


# --- Module Notes -----------------------------------------------------------
# The merge runs on raw keys; cross-namespace collisions (`https://a/roles` in the token,
# `https://b/roles` in the profile) are resolved afterwards by `normalize_claims`.
