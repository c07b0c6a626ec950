"""Comment-preserving YAML document model.

Purpose
-------
Parse ``params.yml`` text into a plain Python value while keeping the
``ruamel.yaml`` round-trip node tree (comments, key order, quoting) so a later
write can re-attach new values without disturbing the surrounding commentary.

Contents
--------
* :class:`Document` – owns the parsed ``CommentedMap`` root.
* :func:`parse_document` – ``text -> (Document, value)``.
* :func:`serialize_document` – surgical in-place update of a document, or a
  structure-free dump when no document is available.
* :class:`DocumentSession` – explicit session object holding at most one
  document; implements :class:`lib_blog_config.application.ports.DocumentCodec`.
* :func:`to_plain` – convert ruamel node types to builtin Python values.

System Role
-----------
Used by :class:`lib_blog_config.core.ConfigService` for both halves of the
read/modify/write cycle. ``serialize_document`` mutates the supplied document;
callers must not reuse a document across unrelated values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.error import YAMLError
from ruamel.yaml.scalarbool import ScalarBoolean
from ruamel.yaml.scalarstring import ScalarString
from ruamel.yaml.tokens import CommentToken

from ...domain.errors import ParseError
from ...observability import log_debug, log_error

#: Slot inside ``ca.items[key]`` that holds the comment following a value.
_MAP_TAIL_SLOT = 2
_SEQ_TAIL_SLOT = 0


def _round_trip_yaml() -> YAML:
    """Return a fresh round-trip YAML instance with the house layout.

    ``YAML`` instances keep per-run state, so one is built per call.
    """

    yaml = YAML(typ="rt")
    yaml.preserve_quotes = True
    yaml.indent(mapping=2, sequence=4, offset=2)
    yaml.width = 4096
    yaml.allow_unicode = True
    return yaml


@dataclass(slots=True)
class Document:
    """Structural representation of the last parsed configuration text.

    ``root`` is ``None`` for empty or comment-only input; the first
    serialisation then creates a fresh mapping. ``preamble`` keeps the comment
    lines of such input verbatim so they are written ahead of that mapping.
    """

    root: CommentedMap | None
    preamble: str = ""


def parse_document(text: str, *, source: str | None = None) -> tuple[Document, dict[str, Any]]:
    """Parse *text* into a :class:`Document` and its plain semantic value.

    Parameters
    ----------
    text:
        YAML source. Empty input yields an empty value, not an error.
    source:
        Optional label (usually the file path) used in error messages.

    Raises
    ------
    ParseError
        When the text is not valid YAML or its root is not a mapping.

    Examples
    --------
    >>> document, value = parse_document("# site\\nauthor: A\\n")
    >>> value
    {'author': 'A'}
    >>> parse_document("")[1]
    {}
    """

    label = source or "<string>"
    try:
        data = _round_trip_yaml().load(text)
    except YAMLError as exc:
        log_error("config_parse_failed", operation="parse", path=source, error=str(exc))
        raise ParseError(f"Invalid YAML in {label}: {exc}") from exc
    if data is None:
        return Document(None, _comment_preamble(text)), {}
    if not isinstance(data, CommentedMap):
        log_error("config_parse_failed", operation="parse", path=source, error="root is not a mapping")
        raise ParseError(f"Invalid YAML in {label}: document did not produce a mapping")
    value = to_plain(data)
    log_debug("config_parsed", operation="parse", path=source, keys=len(value))
    return Document(data), value


def serialize_document(document: Document | None, value: Mapping[str, Any]) -> str:
    """Render *value* as YAML, reusing *document*'s structure when present.

    Why
    ----
    Regenerating the file from scratch would drop every comment the blog
    author wrote; updating the node tree in place keeps them.

    What
    ----
    Walks *value*'s fields. Existing nested groups are recursed into, existing
    scalars and lists are replaced in place (keeping attached comments), keys
    missing from *value* are dropped, and unknown keys are appended to the end
    of their group. Comment lines of a comment-only source are written ahead
    of the new mapping. Without a document the value is dumped with the same
    layout but no comments.

    Side Effects
    ------------
    Mutates ``document.root``.

    Examples
    --------
    >>> document, value = parse_document("# keep me\\nauthor: A  # who\\n")
    >>> print(serialize_document(document, {"author": "B", "toc": True}), end="")
    # keep me
    author: B  # who
    toc: true
    >>> print(serialize_document(None, {"menu": [{"name": "home"}]}), end="")
    menu:
      - name: home
    """

    if document is None:
        return _dump(_to_node(value))
    if document.root is None:
        document.root = CommentedMap()
    _update_mapping(document.root, value)
    return document.preamble + _dump(document.root)


class DocumentSession:
    """Own at most one parsed :class:`Document` for a read/modify/write cycle.

    A new session starts without a document, so constructing one is the reset
    boundary between unrelated requests. :meth:`reset` drops the document
    explicitly; :meth:`serialize` then falls back to structure-free output.
    """

    def __init__(self) -> None:
        self._document: Document | None = None

    @property
    def document(self) -> Document | None:
        return self._document

    def parse(self, text: str, *, source: str | None = None) -> dict[str, Any]:
        """Parse *text* and keep its document for the next :meth:`serialize`.

        Why
        ----
        The write half of a request needs the node tree of the text the read
        half saw; holding it here keeps that state out of module globals.

        What
        ----
        Replaces any previously held document, even when *text* is empty.

        Raises
        ------
        ParseError
            Propagated from :func:`parse_document`; the held document is left
            unchanged in that case.

        Examples
        --------
        >>> session = DocumentSession()
        >>> session.parse("author: A\\n")
        {'author': 'A'}
        >>> session.document is not None
        True
        """

        self._document, value = parse_document(text, source=source)
        return value

    def serialize(self, value: Mapping[str, Any]) -> str:
        """Render *value* through the held document (see :func:`serialize_document`).

        Examples
        --------
        >>> session = DocumentSession()
        >>> _ = session.parse("# c\\nauthor: A\\n")
        >>> session.serialize({"author": "B"})
        '# c\\nauthor: B\\n'
        """

        return serialize_document(self._document, value)

    def reset(self) -> None:
        """Forget the held document; later output carries no comments."""

        self._document = None

    def round_trip(self, text: str, modifications: Mapping[str, Any] | None = None) -> str:
        """Parse *text*, overlay top-level *modifications*, and serialise again.

        Examples
        --------
        >>> DocumentSession().round_trip("# c\\nauthor: A\\n", {"author": "B"})
        '# c\\nauthor: B\\n'
        """

        value = self.parse(text)
        if modifications:
            value = {**value, **modifications}
        return self.serialize(value)


def to_plain(node: Any) -> Any:
    """Convert ruamel node types into builtin Python values.

    Examples
    --------
    >>> doc, _ = parse_document("a: 'x'\\nb: [1, 2.5]\\n")
    >>> to_plain(doc.root)
    {'a': 'x', 'b': [1, 2.5]}
    """

    if isinstance(node, Mapping):
        return {to_plain(key): to_plain(value) for key, value in node.items()}
    if isinstance(node, (list, tuple)):
        return [to_plain(item) for item in node]
    if isinstance(node, bool):
        return node
    if isinstance(node, ScalarBoolean):
        return bool(node)
    if isinstance(node, str):
        return str(node)
    if isinstance(node, int):
        return int(node)
    if isinstance(node, float):
        return float(node)
    if isinstance(node, datetime):
        return datetime(
            node.year, node.month, node.day, node.hour, node.minute, node.second, node.microsecond, node.tzinfo
        )
    if isinstance(node, date):
        return date(node.year, node.month, node.day)
    return node


def _dump(root: Any) -> str:
    stream = StringIO()
    _round_trip_yaml().dump(root, stream)
    return stream.getvalue()


def _to_node(value: Any) -> Any:
    """Build ruamel containers for *value* so new nodes can carry comments later."""

    if isinstance(value, Mapping):
        node = CommentedMap()
        for key, item in value.items():
            node[key] = _to_node(item)
        return node
    if isinstance(value, (list, tuple)):
        return CommentedSeq(_to_node(item) for item in value)
    return value


def _same(left: Any, right: Any) -> bool:
    """Compare plain values strictly (``True`` is not ``1``, ``1`` is not ``1.0``)."""

    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(_same(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(_same(a, b) for a, b in zip(left, right))
    return type(left) is type(right) and left == right


def _comment_preamble(text: str) -> str:
    """Return the comment and blank lines of a document without content."""

    lines = [line for line in text.splitlines(keepends=True) if not line.strip() or line.lstrip().startswith("#")]
    preamble = "".join(lines)
    if "#" not in preamble:
        return ""
    return preamble if preamble.endswith("\n") else preamble + "\n"


def _update_mapping(node: CommentedMap, value: Mapping[str, Any]) -> None:
    """Make *node* equal to *value*: update shared keys, drop stale ones, append new ones.

    The comment block trailing *node* stays at its end when stale keys go.
    """

    stale = [key for key in node if key not in value]
    tail = _pop_comment(_tail_slot(node)) if stale else None
    for key in stale:
        del node[key]
        node.ca.items.pop(key, None)
    for key, new in value.items():
        if key in node:
            _update_entry(node, key, new)
        else:
            node[key] = _to_node(new)
    if tail is not None:
        _push_comment(_tail_slot(node), tail)


def _update_entry(container: CommentedMap | CommentedSeq, key: Any, new: Any) -> None:
    old = container[key]
    if _same(to_plain(old), new):
        return
    if isinstance(new, Mapping) and isinstance(old, CommentedMap):
        if old and not new:
            _replace(container, key, new)
        else:
            _update_mapping(old, new)
        return
    if isinstance(new, (list, tuple)) and isinstance(old, CommentedSeq):
        _update_sequence(container, key, new)
        return
    if isinstance(new, str) and isinstance(old, ScalarString):
        container[key] = type(old)(new)
        return
    _replace(container, key, new)


def _update_sequence(
    container: CommentedMap | CommentedSeq, key: Any, value: list[Any] | tuple[Any, ...]
) -> None:
    """Update ``container[key]`` element-wise so comments on retained elements survive.

    When the length changes, the comment block trailing the old last element
    moves to the new last element (or to ``key`` itself when the list empties).
    """

    node: CommentedSeq = container[key]
    tail = _detach_entry_tail(container, key) if len(node) != len(value) else None
    for index, item in enumerate(value):
        if index < len(node):
            _update_entry(node, index, item)
        else:
            node.append(_to_node(item))
    # CommentedSeq renumbers its comment slots only for single-index deletes.
    while len(node) > len(value):
        del node[len(node) - 1]
    if tail is not None:
        _attach_entry_tail(container, key, tail)


def _replace(container: CommentedMap | CommentedSeq, key: Any, new: Any) -> None:
    """Swap the value under *key* and carry over the comment block trailing it."""

    tail = _detach_entry_tail(container, key)
    container[key] = _to_node(new)
    if tail is not None:
        _attach_entry_tail(container, key, tail)


def _tail_slot(node: Any) -> tuple[CommentedMap | CommentedSeq, Any, int] | None:
    """Locate ``(container, key, slot)`` holding the comment after *node*'s last line."""

    if isinstance(node, CommentedMap) and node:
        last = list(node)[-1]
        value = node[last]
        if isinstance(value, (CommentedMap, CommentedSeq)) and value:
            return _tail_slot(value)
        return node, last, _MAP_TAIL_SLOT
    if isinstance(node, CommentedSeq) and node:
        last = len(node) - 1
        value = node[last]
        if isinstance(value, (CommentedMap, CommentedSeq)) and value:
            return _tail_slot(value)
        return node, last, _SEQ_TAIL_SLOT
    return None


def _entry_slot(container: CommentedMap | CommentedSeq, key: Any) -> tuple[Any, Any, int]:
    value = container[key]
    slot = _tail_slot(value)
    if slot is not None:
        return slot
    return container, key, _SEQ_TAIL_SLOT if isinstance(container, CommentedSeq) else _MAP_TAIL_SLOT


def _pop_comment(slot: tuple[Any, Any, int] | None) -> CommentToken | None:
    if slot is None:
        return None
    container, key, index = slot
    entry = container.ca.items.get(key)
    if not entry or len(entry) <= index or entry[index] is None:
        return None
    token = entry[index]
    entry[index] = None
    return token


def _push_comment(slot: tuple[Any, Any, int] | None, token: CommentToken) -> None:
    if slot is None:
        return
    container, key, index = slot
    entry = container.ca.items.setdefault(key, [None, None, None, None])
    current = entry[index]
    if current is None:
        entry[index] = token
        return
    # Both halves may end the same line; keep a single line break between them.
    addition = token.value[1:] if current.value.endswith("\n") and token.value.startswith("\n") else token.value
    entry[index] = CommentToken(current.value + addition, current.start_mark, current.end_mark)


def _detach_entry_tail(container: CommentedMap | CommentedSeq, key: Any) -> CommentToken | None:
    return _pop_comment(_entry_slot(container, key))


def _attach_entry_tail(container: CommentedMap | CommentedSeq, key: Any, token: CommentToken) -> None:
    _push_comment(_entry_slot(container, key), token)
