"""Application-layer update merge policy.

Purpose
-------
Combine a partial update request with the complete current configuration.
Free of I/O and copy-on-write, so callers can retry or repeat partial updates
without corrupting their working copy.

Contents
    - ``merge_update``: public entry point driven by a simple loop.
    - ``_merge_group`` / ``_set_value``: tiny helpers that narrate how a single
      field is combined.

Rules
-----
* Fields absent from the update, or present with ``None``, are left untouched.
* A nested group in the update is merged one level deep onto a nested group in
  the current value: the update's sub-fields overwrite, the others are kept.
  ``None`` sub-fields are skipped the same way as top-level ``None`` fields.
* Lists, scalars, and groups that land on a non-group current value replace the
  current value outright.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any


def merge_update(current: Mapping[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new configuration with *update* merged onto *current*.

    Parameters
    ----------
    current:
        Complete configuration (typically fresh from the Default Resolver).
    update:
        Partial configuration submitted by a caller.

    Returns
    -------
    dict[str, Any]
        Merged configuration; *current* and *update* are not mutated.

    Examples
    --------
    >>> current = {"author": "A", "footer": {"since": 2020, "powered": True}, "menu": [{"name": "home"}]}
    >>> merged = merge_update(current, {"footer": {"since": 2021}, "menu": [], "email": None})
    >>> merged["footer"], merged["menu"], "email" in merged
    ({'since': 2021, 'powered': True}, [], False)
    >>> current["footer"]["since"]
    2020
    """

    result: dict[str, Any] = deepcopy(dict(current))
    for key, value in update.items():
        if value is None:
            continue
        existing = result.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            result[key] = _merge_group(existing, value)
        else:
            _set_value(result, key, value)
    return result


def _merge_group(existing: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Overwrite *existing*'s sub-fields with *incoming*'s non-null sub-fields."""

    group = dict(existing)
    for key, value in incoming.items():
        if value is None:
            continue
        _set_value(group, key, value)
    return group


def _set_value(target: dict[str, Any], key: str, value: Any) -> None:
    """Assign a deep copy so later mutation of the request cannot leak in."""

    target[key] = deepcopy(value)
