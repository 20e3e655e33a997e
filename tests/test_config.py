from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from relaykit.config import (
    from_context,
    register_config_creator,
    with_config,
    with_json_config,
    with_yaml_config,
)
from relaykit.errors import ProxyError


@dataclass
class Foo:
    field1: str = ""
    field2: bool = False


@dataclass
class SampleStruct:
    field1: str = ""
    field2: bool = False
    field3: list[Foo] = field(default_factory=list)


@dataclass
class Renamed:
    run_type: str = field(default="", metadata={"json": "run_type", "yaml": "run-type"})
    log_level: int = field(default=1, metadata={"json": "log_level", "yaml": "log-level"})


@pytest.fixture(autouse=True)
def creators():
    register_config_creator("test", SampleStruct)
    register_config_creator("renamed", Renamed)


def test_json_config():
    data = b"""
    {
        "field1": "test1",
        "field2": true,
        "field3": [
            {
                "field1": "aaaa",
                "field2": true
            }
        ]
    }
    """
    ctx = with_json_config({}, data)
    c = from_context(ctx, "test")
    assert c.field1 == "test1"
    assert c.field2 is True
    assert c.field3 == [Foo(field1="aaaa", field2=True)]


def test_yaml_config():
    data = b"""
field1: 012345678
field2: true
field3:
  - field1: test
    field2: true
"""
    ctx = with_yaml_config({}, data)
    c = from_context(ctx, "test")
    assert c.field1 == "012345678"
    assert c.field2 is True
    assert c.field3[0].field1 == "test"


def test_format_specific_keys_and_defaults():
    ctx = with_yaml_config(None, "run-type: client\n")
    cfg = from_context(ctx, "renamed")
    assert cfg == Renamed(run_type="client", log_level=1)
    ctx = with_json_config(None, '{"run_type": "server", "log_level": 3}')
    assert from_context(ctx, "renamed") == Renamed(run_type="server", log_level=3)


def test_each_parse_builds_fresh_sections():
    first = from_context(with_json_config(None, '{"field1": "a"}'), "test")
    second = from_context(with_json_config(None, '{"field1": "b"}'), "test")
    assert first.field1 == "a"
    assert second.field1 == "b"


def test_empty_yaml_gives_defaults():
    ctx = with_yaml_config(None, b"")
    assert from_context(ctx, "test") == SampleStruct()


def test_with_config_round_trip_and_immutability():
    base = {"other_CONFIG": 1}
    value = SampleStruct(field1="x")
    ctx = with_config(base, "test", value)
    assert from_context(ctx, "test") is value
    assert from_context(ctx, "other") == 1
    assert from_context(base, "test") is None


def test_missing_section_is_none():
    assert from_context({}, "absent") is None


def test_invalid_json_raises():
    with pytest.raises(ProxyError):
        with_json_config(None, b"{not json")


def test_invalid_yaml_raises():
    with pytest.raises(ProxyError):
        with_yaml_config(None, b"key: [unclosed")


def test_non_object_document_raises():
    with pytest.raises(ProxyError):
        with_json_config(None, b"[1, 2]")