import pytest

from clice.config import CacheOptions, IndexOptions, Rule, ServerOptions


def test_cache_defaults():
    options = CacheOptions()
    assert options.limit == 0
    assert options.dir == ""


def test_cache_rejects_negative_limit():
    with pytest.raises(ValueError):
        CacheOptions(dir="cache", limit=-1)


def test_index_defaults_to_implicit_instantiation():
    assert IndexOptions().implicit_instantiation is True
    assert IndexOptions(dir="temp").dir == "temp"


def test_server_options_lists_are_independent():
    a = ServerOptions()
    b = ServerOptions()
    a.compile_commands_dirs.append("build")
    assert b.compile_commands_dirs == []


def test_rule_fields_and_equality():
    rule = Rule(pattern="*.cpp", append=["-std=c++20"], remove=["-O2"])
    assert rule == Rule(pattern="*.cpp", append=["-std=c++20"], remove=["-O2"])
    assert rule.context == []
    other = Rule()
    rule.context.append("main.cpp")
    assert other.context == []