"""Domain-level configuration value objects.

Purpose
-------
Describe the shape of a blog's ``params.yml`` (one typed section per known
composite field), anchor the process-wide default table, and provide the
immutable :class:`ConfigValue` handed to callers. This module contains no I/O.

Contents
--------
* Section types (:class:`FooterConfig`, :class:`CommentConfig`, ...) and the
  top-level :class:`BlogConfig` shape.
* :data:`SECTION_TYPES` – registry of known composite sections keyed by field.
* :data:`DEFAULT_CONFIG` – frozen default table; never mutated at runtime.
* :class:`ConfigValue` – ``Mapping`` implementation exposing dotted lookups,
  per-key origin markers (``"file"`` or ``"default"``), and deep copies.
* :func:`thaw` / :func:`freeze` – convert between frozen and mutable trees.
* :data:`EMPTY_CONFIG` – canonical empty instance.

System Role
-----------
The Default Resolver completes values against :data:`DEFAULT_CONFIG`; the
orchestrator wraps completed values in :class:`ConfigValue` for read callers.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from collections.abc import Mapping as MappingABC
from dataclasses import dataclass
from datetime import date, datetime, timezone
from types import MappingProxyType
from typing import Any, Final, Iterator, Literal, TypedDict, TypeVar, overload

Origin = Literal["file", "default"]


class MenuItem(TypedDict, total=False):
    """Navigation entry rendered in the site header."""

    name: str
    url: str
    icon: str


class IconConfig(TypedDict, total=False):
    url: str
    rotate: bool
    mask: bool


class FooterConfig(TypedDict, total=False):
    """Footer block; ``icon`` is itself a nested group with its own defaults."""

    since: int
    powered: bool
    count: bool
    busuanzi: bool
    icon: IconConfig


class CursorConfig(TypedDict, total=False):
    enable: bool
    default: str
    pointer: str
    text: str


class DarkModeConfig(TypedDict, total=False):
    enable: bool
    auto: bool


class CommentConfig(TypedDict, total=False):
    """Comment provider settings.

    Provider-specific keys (``waline``, ``giscus`` ...) are not enumerated and
    pass through untouched.
    """

    enable: bool
    provider: str


class AlgoliaConfig(TypedDict, total=False):
    enable: bool
    appId: str
    apiKey: str
    indexName: str


class PreloaderConfig(TypedDict, total=False):
    enable: bool
    text: str


class AnimationConfig(TypedDict, total=False):
    enable: bool
    duration: float


class FireworkConfig(TypedDict, total=False):
    enable: bool
    colors: list[str]


class CopyrightConfig(TypedDict, total=False):
    enable: bool
    license: str


class SponsorConfig(TypedDict, total=False):
    enable: bool
    alipay: str
    wechat: str


class BlogConfig(TypedDict, total=False):
    """Top-level ``params.yml`` shape.

    Only ``author`` and ``email`` matter to existing content; every other field
    is optional and defaulted. Keys not listed here are preserved as-is.
    """

    menu: list[MenuItem]
    mainSections: list[str]
    author: str
    email: str
    description: str
    subtitle: str
    banner: str
    avatar: str
    cover: str | bool
    toc: bool
    yearFormat: str
    monthFormat: str
    dateFormat: str
    timeFormat: str
    footer: FooterConfig
    sidebar: Literal["left", "right"]
    social: dict[str, str]
    widgets: list[str]
    reimu_cursor: CursorConfig
    dark_mode: DarkModeConfig
    comment: CommentConfig
    algolia_search: AlgoliaConfig
    preloader: PreloaderConfig
    animation: AnimationConfig
    firework: FireworkConfig
    article_copyright: CopyrightConfig
    sponsor: SponsorConfig
    share: list[str]


#: Known composite sections. Anything else is an opaque pass-through value.
SECTION_TYPES: Final[Mapping[str, type]] = MappingProxyType(
    {
        "footer": FooterConfig,
        "reimu_cursor": CursorConfig,
        "dark_mode": DarkModeConfig,
        "comment": CommentConfig,
        "algolia_search": AlgoliaConfig,
        "preloader": PreloaderConfig,
        "animation": AnimationConfig,
        "firework": FireworkConfig,
        "article_copyright": CopyrightConfig,
        "sponsor": SponsorConfig,
    }
)


def freeze(value: Any) -> Any:
    """Return a read-only copy of *value* (mappings become proxies, lists tuples).

    Examples
    --------
    >>> frozen = freeze({"a": [1, {"b": 2}]})
    >>> frozen["a"][1]["b"]
    2
    >>> isinstance(frozen["a"], tuple)
    True
    """

    if isinstance(value, MappingABC):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Return a deep mutable copy of *value* (proxies become dicts, tuples lists).

    Examples
    --------
    >>> thaw(freeze({"a": (1, 2)}))
    {'a': [1, 2]}
    """

    if isinstance(value, MappingABC):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


#: Frozen default table. ``footer.since`` is fixed to the year the process
#: imported this module.
DEFAULT_CONFIG: Final[Mapping[str, Any]] = freeze(
    {
        "menu": [],
        "mainSections": ["post"],
        "author": "",
        "email": "",
        "description": "",
        "subtitle": "",
        "banner": "",
        "avatar": "",
        "toc": True,
        "yearFormat": "2006",
        "monthFormat": "2006-01",
        "dateFormat": "2006-01-02",
        "timeFormat": "2006-01-02 15:04:05",
        "footer": {
            "since": datetime.now(timezone.utc).year,
            "powered": True,
            "count": True,
            "busuanzi": False,
            "icon": {"url": "", "rotate": False, "mask": False},
        },
        "sidebar": "left",
        "social": {},
        "widgets": [],
        "reimu_cursor": {"enable": False},
        "dark_mode": {"enable": False, "auto": False},
        "comment": {"enable": False},
        "algolia_search": {"enable": False},
        "preloader": {"enable": False},
        "animation": {"enable": False},
        "firework": {"enable": False},
        "article_copyright": {"enable": False},
        "sponsor": {"enable": False},
        "share": [],
    }
)


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ConfigValue(MappingABC[str, Any]):
    """Immutable, completed blog configuration returned to callers.

    Why
    ----
    Readers (CLI, route layer) need a value they cannot accidentally mutate,
    plus a way to tell which fields came from the file and which from defaults.

    Parameters
    ----------
    _data:
        Completed configuration tree. Wrapped in ``mappingproxy`` on init.
    _origins:
        Mapping from dotted leaf keys to ``"file"`` or ``"default"``.

    Examples
    --------
    >>> value = ConfigValue({"author": "A", "footer": {"since": 2020}}, {"author": "file", "footer.since": "default"})
    >>> value.get("footer.since")
    2020
    >>> value.origin("author")
    'file'
    >>> value.get("footer.missing", default="fallback")
    'fallback'
    """

    _data: Mapping[str, Any]
    _origins: Mapping[str, Origin]

    def __post_init__(self) -> None:
        object.__setattr__(self, "_data", MappingProxyType(dict(self._data)))
        object.__setattr__(self, "_origins", MappingProxyType(dict(self._origins)))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def as_dict(self) -> dict[str, Any]:
        """Return a deep mutable copy suitable for merging or serialisation.

        Examples
        --------
        >>> value = ConfigValue({"social": {"github": "x"}}, {})
        >>> clone = value.as_dict()
        >>> clone["social"]["github"] = "y"
        >>> value.get("social.github")
        'x'
        """

        return thaw(self._data)

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise the configuration to JSON (dates become ISO strings).

        Examples
        --------
        >>> ConfigValue({"toc": True}, {}).to_json()
        '{"toc":true}'
        """

        separators = (",", ":") if indent is None else (",", ": ")
        return json.dumps(self.as_dict(), indent=indent, separators=separators, ensure_ascii=False, default=_json_default)

    @overload
    def get(self, key: str, *, default: T) -> Any | T:  # type: ignore[override]
        ...

    @overload
    def get(self, key: str, *, default: None = ...) -> Any | None:  # type: ignore[override]
        ...

    def get(self, key: str, *, default: Any = None) -> Any:
        """Resolve *key* as a dotted path and return ``default`` when missing."""

        return _resolve_dotted_path(self._data, key, default)

    def origin(self, key: str) -> Origin | None:
        """Return ``"file"``/``"default"`` for a dotted leaf key, ``None`` when unknown."""

        return self._origins.get(key)

    def origins(self) -> dict[str, Origin]:
        """Return a copy of the full origin map."""

        return dict(self._origins)


def _resolve_dotted_path(source: Mapping[str, Any], dotted: str, default: Any) -> Any:
    """Resolve *dotted* within *source*, returning *default* when missing."""

    current: Any = source
    for part in dotted.split("."):
        if not isinstance(current, MappingABC) or part not in current:
            return default
        current = current[part]
    return current


def _json_default(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


#: Shared empty value; safe to re-use because :class:`ConfigValue` is immutable.
EMPTY_CONFIG = ConfigValue(MappingProxyType({}), MappingProxyType({}))
