"""Application-layer default resolution.

Purpose
-------
Complete a (possibly partial or empty) parsed configuration against the
frozen :data:`lib_blog_config.domain.config.DEFAULT_CONFIG` table. Remains free
of I/O so it can be exercised directly by property tests.

Contents
    - ``apply_defaults``: public entry point.
    - ``default_config``: mutable copy of the full default table.
    - ``resolve_origins``: mark every completed leaf as ``file`` or ``default``.
    - ``_overlay``: recursive field-by-field overlay used for nested groups.

Rules
-----
* Nested groups present in both the source and the defaults are overlaid field
  by field at every depth, so supplying ``footer.since`` keeps the remaining
  footer defaults (including ``footer.icon``).
* Lists and scalars in the source replace the default outright.
* An explicit ``null`` for a field that has a default reverts to that default.
  A ``null`` for a field without a default is kept as a pass-through value.
"""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

from ..domain.config import DEFAULT_CONFIG, Origin, thaw


def default_config() -> dict[str, Any]:
    """Return a fresh mutable copy of the full default table.

    Examples
    --------
    >>> cfg = default_config()
    >>> cfg["sidebar"], cfg["footer"]["icon"]["rotate"]
    ('left', False)
    """

    return thaw(DEFAULT_CONFIG)


def apply_defaults(partial: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a complete configuration built from *partial* and the defaults.

    Why
    ----
    Editors expect every optional field to have a value even when the blog's
    ``params.yml`` only lists a handful of keys.

    Parameters
    ----------
    partial:
        Parsed configuration (plain Python values) or ``None`` for empty input.

    Returns
    -------
    dict[str, Any]
        New mapping; neither *partial* nor the default table is mutated.

    Examples
    --------
    >>> completed = apply_defaults({"author": "A", "footer": {"since": 2019}})
    >>> completed["author"], completed["toc"], completed["footer"]["since"], completed["footer"]["powered"]
    ('A', True, 2019, True)
    >>> apply_defaults(None)["mainSections"]
    ['post']
    >>> apply_defaults({"toc": None})["toc"]
    True
    """

    if not partial:
        return default_config()
    return _overlay(DEFAULT_CONFIG, partial)


def _overlay(defaults: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Overlay *incoming* onto a thawed copy of *defaults*, recursing into groups."""

    result: dict[str, Any] = thaw(defaults)
    for key, value in incoming.items():
        fallback = defaults.get(key)
        if value is None:
            if key not in defaults:
                result[key] = None
            continue
        if isinstance(value, Mapping) and isinstance(fallback, Mapping):
            result[key] = _overlay(fallback, value)
        else:
            result[key] = deepcopy(value)
    return result


def resolve_origins(partial: Mapping[str, Any] | None, completed: Mapping[str, Any]) -> dict[str, Origin]:
    """Map every dotted leaf of *completed* to ``"file"`` or ``"default"``.

    A leaf is any non-mapping value or an empty mapping. A leaf counts as
    ``file`` when *partial* supplied a non-null value at the same path, or
    supplied the key at all (even as ``null``) where no default exists.

    Examples
    --------
    >>> origins = resolve_origins({"footer": {"since": 2019}}, apply_defaults({"footer": {"since": 2019}}))
    >>> origins["footer.since"], origins["footer.icon.url"], origins["toc"]
    ('file', 'default', 'default')
    >>> resolve_origins({"flag": None, "toc": None}, apply_defaults({"flag": None, "toc": None}))["flag"]
    'file'
    """

    origins: dict[str, Origin] = {}
    _collect_origins(partial or {}, completed, DEFAULT_CONFIG, [], origins)
    return origins


def _collect_origins(
    source: Mapping[str, Any] | None,
    completed: Mapping[str, Any],
    defaults: Any,
    segments: list[str],
    origins: dict[str, Origin],
) -> None:
    known = defaults if isinstance(defaults, Mapping) else {}
    for key, value in completed.items():
        dotted = ".".join([*segments, str(key)])
        present = isinstance(source, Mapping) and key in source
        supplied = source.get(key) if present else None
        if isinstance(value, Mapping) and value:
            nested = supplied if isinstance(supplied, Mapping) else None
            _collect_origins(nested, value, known.get(key), [*segments, str(key)], origins)
            continue
        from_file = supplied is not None or (present and key not in known)
        origins[dotted] = "file" if from_file else "default"
