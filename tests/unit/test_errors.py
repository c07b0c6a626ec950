from __future__ import annotations

import pytest

from lib_blog_config.domain.errors import (
    ConfigError,
    ConfigIOError,
    InvalidUpdate,
    NotConfigured,
    NotFound,
    ParseError,
)


def test_error_hierarchy() -> None:
    for cls in (NotConfigured, NotFound, ParseError, ConfigIOError, InvalidUpdate):
        assert issubclass(cls, ConfigError)
        assert isinstance(cls(""), ConfigError)


@pytest.mark.parametrize(
    ("cls", "kind", "status_code"),
    [
        (ConfigError, "ConfigError", 500),
        (NotConfigured, "NotConfigured", 400),
        (NotFound, "NotFound", 400),
        (ParseError, "ParseError", 400),
        (ConfigIOError, "IOError", 500),
        (InvalidUpdate, "InvalidUpdate", 400),
    ],
)
def test_error_kind_and_status(cls: type[ConfigError], kind: str, status_code: int) -> None:
    error = cls("boom")
    assert error.kind == kind
    assert error.status_code == status_code
    assert str(error) == "boom"
