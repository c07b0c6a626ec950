"""Document model tests: parse, surgical re-serialisation, and comment survival.

The sample ``params.yml`` from ``tests.support`` carries a file-level comment,
inline comments, and a standalone comment that ruamel attaches to the last
menu entry, which is the case most likely to be lost when lists change shape.
"""

from __future__ import annotations

import json
import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lib_blog_config.adapters.document.yaml_document import (
    DocumentSession,
    parse_document,
    serialize_document,
)
from lib_blog_config.application.defaults import apply_defaults
from lib_blog_config.application.merge import merge_update
from lib_blog_config.domain.errors import ParseError
from tests.support import SAMPLE_PARAMS

KEY = st.text(alphabet=string.ascii_lowercase, min_size=1, max_size=8).map(lambda text: f"k_{text}")
TEXT = st.text(
    alphabet=st.one_of(st.characters(whitelist_categories=("L", "N")), st.sampled_from(" -_:#'\"")),
    max_size=12,
)
SCALAR = st.one_of(st.booleans(), st.integers(min_value=-(10**9), max_value=10**9), TEXT)
VALUE = st.recursive(
    SCALAR,
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(KEY, children, max_size=3),
    ),
    max_leaves=8,
)


def _parsed(text: str) -> dict:
    return parse_document(text)[1]


def test_parse_returns_plain_value() -> None:
    value = _parsed(SAMPLE_PARAMS)
    assert value["author"] == "A"
    assert value["description"] == "A quiet blog"
    assert type(value["description"]) is str
    assert value["menu"] == [{"name": "Home", "url": "/"}, {"name": "Posts", "url": "/posts/"}]
    assert value["footer"] == {"since": 2020, "icon": {"url": "heart.svg"}}
    assert value["animation"]["enable"] is True


@pytest.mark.parametrize("text", ["", "\n", "# only a comment\n"])
def test_empty_documents_parse_to_empty_value(text: str) -> None:
    document, value = parse_document(text)
    assert value == {}
    assert document.root is None


@pytest.mark.parametrize(
    "text",
    [
        "author: [unclosed\n",
        "author: A\n  bad: indent\n",
        "- just\n- a list\n",
        "plain scalar\n",
    ],
)
def test_invalid_documents_raise_parse_error(text: str) -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_document(text, source="params.yml")
    assert str(excinfo.value).startswith("Invalid YAML in params.yml")


def test_unchanged_value_reproduces_source() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    assert session.serialize(value) == SAMPLE_PARAMS


def test_scalar_update_keeps_inline_and_standalone_comments() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "author": "B"})
    assert "author: B  # 作者" in rendered
    assert rendered.startswith("# 站点参数\n")
    assert "# 作者信息" in rendered
    assert "enable: true  # 动画" in rendered


def test_new_keys_are_appended() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "toc": False})
    assert rendered == SAMPLE_PARAMS + "toc: false\n"


def test_nested_group_update_is_in_place() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    merged = merge_update(value, {"footer": {"since": 2021}})
    rendered = session.serialize(merged)
    assert "  since: 2021\n" in rendered
    assert "    url: heart.svg\n" in rendered
    assert _parsed(rendered)["footer"] == {"since": 2021, "icon": {"url": "heart.svg"}}


def test_quote_style_is_kept() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "description": "Loud"})
    assert 'description: "Loud"' in rendered


def test_shrinking_a_list_keeps_the_trailing_comment() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "menu": [{"name": "Home", "url": "/"}]})
    assert "Posts" not in rendered
    assert "# 作者信息" in rendered
    assert _parsed(rendered)["menu"] == [{"name": "Home", "url": "/"}]
    assert _parsed(rendered)["social"] == {"github": "https://github.com/a"}


def test_emptying_a_list_keeps_the_trailing_comment() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "menu": []})
    assert "# 作者信息" in rendered
    assert _parsed(rendered)["menu"] == []


def test_growing_a_list_keeps_the_trailing_comment() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    menu = [*value["menu"], {"name": "About", "url": "/about/"}]
    rendered = session.serialize({**value, "menu": menu})
    assert "# 作者信息" in rendered
    assert rendered.index("About") < rendered.index("# 作者信息")
    assert _parsed(rendered)["menu"] == menu


def test_list_elements_are_synced() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "menu": [{"name": "Start"}, {"name": "Posts", "url": "/posts/"}]})
    assert _parsed(rendered)["menu"] == [{"name": "Start"}, {"name": "Posts", "url": "/posts/"}]
    assert "# 作者信息" in rendered


def test_type_change_replaces_value() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "social": "none"})
    assert _parsed(rendered)["social"] == "none"
    assert rendered.startswith("# 站点参数\n")


def test_unknown_keys_survive_updates() -> None:
    session = DocumentSession()
    value = session.parse("custom:\n  nested: [1, 2]\nauthor: A\n")
    rendered = session.serialize({**value, "author": "B"})
    assert _parsed(rendered) == {"custom": {"nested": [1, 2]}, "author": "B"}


def test_reset_falls_back_to_structure_free_output() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    session.reset()
    assert session.document is None
    rendered = session.serialize(value)
    assert "# " not in rendered
    assert _parsed(rendered) == value


def test_serialize_without_document_uses_house_layout() -> None:
    rendered = serialize_document(None, {"author": "A", "menu": [{"name": "Home", "url": "/"}], "toc": True})
    assert rendered == "author: A\nmenu:\n  - name: Home\n    url: /\ntoc: true\n"


def test_serialize_into_empty_document_creates_root() -> None:
    document, _ = parse_document("")
    rendered = serialize_document(document, {"author": "A"})
    assert rendered == "author: A\n"
    assert document.root is not None


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("# only a comment\n# second line\n", "# only a comment\n# second line\nauthor: B\n"),
        ("# site\n\n# params\n", "# site\n\n# params\nauthor: B\n"),
        ("---\n# after the marker", "# after the marker\nauthor: B\n"),
    ],
)
def test_comment_only_source_keeps_its_comments(text: str, expected: str) -> None:
    session = DocumentSession()
    assert session.parse(text) == {}
    assert session.serialize({"author": "B"}) == expected
    assert session.serialize({"author": "C"}).startswith(expected.split("author")[0])


def test_removed_group_fields_are_dropped() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    merged = merge_update(value, {"footer": {"since": 2020, "icon": {"name": "x"}}})
    rendered = session.serialize(merged)
    assert "heart.svg" not in rendered
    assert _parsed(rendered)["footer"] == {"since": 2020, "icon": {"name": "x"}}
    assert rendered.endswith("  enable: true  # 动画\n")


def test_dropping_the_last_group_field_keeps_the_trailing_comment() -> None:
    session = DocumentSession()
    value = session.parse("menu:\n  - name: Home\n    url: /\n# social links\nsocial:\n  github: g\n")
    rendered = session.serialize({**value, "menu": [{"name": "Home"}]})
    assert "# social links" in rendered
    assert rendered.index("Home") < rendered.index("# social links") < rendered.index("social:")
    assert _parsed(rendered) == {"menu": [{"name": "Home"}], "social": {"github": "g"}}


def test_emptying_a_group_keeps_the_trailing_comment() -> None:
    session = DocumentSession()
    value = session.parse(SAMPLE_PARAMS)
    rendered = session.serialize({**value, "social": {}})
    assert _parsed(rendered)["social"] == {}
    assert "# 作者信息" in rendered


def test_round_trip_helper() -> None:
    assert DocumentSession().round_trip("# c\nauthor: A\n", {"author": "B"}) == "# c\nauthor: B\n"


@given(st.dictionaries(KEY, VALUE, max_size=5))
def test_round_trip_preserves_defined_fields(value) -> None:
    rendered = serialize_document(None, value)
    completed = apply_defaults(_parsed(rendered))
    for key, item in value.items():
        assert completed[key] == item


@given(st.dictionaries(KEY, SCALAR, min_size=1, max_size=6), st.data())
def test_comment_lines_survive_any_update(entries, data) -> None:
    lines = []
    for index, (key, item) in enumerate(entries.items()):
        lines.append(f"# comment {index}")
        lines.append(f"{key}: {json.dumps(item, ensure_ascii=False)}  # inline {index}")
    text = "\n".join(lines) + "\n"
    update = data.draw(st.dictionaries(st.sampled_from(sorted(entries)), SCALAR))

    session = DocumentSession()
    current = session.parse(text)
    assert current == entries
    merged = merge_update(current, update)
    rendered = session.serialize(merged)

    for index in range(len(entries)):
        assert f"# comment {index}" in rendered
        assert f"# inline {index}" in rendered
    assert _parsed(rendered) == merged


GROUP = st.dictionaries(KEY, SCALAR, min_size=1, max_size=3)
ITEMS = st.lists(GROUP, min_size=1, max_size=3)
ENTRY = st.one_of(SCALAR, GROUP, ITEMS)


def _render_entry(key: str, item) -> list[str]:
    def _scalar(value) -> str:
        return json.dumps(value, ensure_ascii=False)

    if isinstance(item, dict):
        return [f"{key}:", *(f"  {sub}: {_scalar(value)}" for sub, value in item.items())]
    if isinstance(item, list):
        lines = [f"{key}:"]
        for element in item:
            for position, (sub, value) in enumerate(element.items()):
                lines.append(f"{'  - ' if position == 0 else '    '}{sub}: {_scalar(value)}")
        return lines
    return [f"{key}: {_scalar(item)}"]


@given(st.dictionaries(KEY, ENTRY, min_size=1, max_size=5), st.data())
def test_comment_lines_survive_nested_updates(entries, data) -> None:
    lines = ["# header"]
    for index, (key, item) in enumerate(entries.items()):
        lines.append(f"# comment {index}")
        lines.extend(_render_entry(key, item))
    text = "\n".join(lines) + "\n"
    update = data.draw(st.dictionaries(st.sampled_from(sorted(entries)), ENTRY))

    session = DocumentSession()
    current = session.parse(text)
    assert current == entries
    merged = merge_update(current, update)
    rendered = session.serialize(merged)

    assert rendered.startswith("# header\n")
    for index in range(len(entries)):
        assert f"# comment {index}" in rendered
    assert _parsed(rendered) == merged


@given(st.lists(TEXT.map(lambda text: f"# {text}"), min_size=1, max_size=4), st.dictionaries(KEY, SCALAR, max_size=3))
def test_comment_only_sources_keep_every_line(comments, value) -> None:
    text = "\n".join(comments) + "\n"
    rendered = DocumentSession().round_trip(text, value)
    assert rendered.startswith(text)
    assert _parsed(rendered) == value
