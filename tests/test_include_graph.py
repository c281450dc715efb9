from datetime import timedelta

from clice.include_graph import (
    Context,
    Header,
    HeaderContext,
    HeaderIndex,
    IncludeLocation,
    TranslationUnit,
)


def make_header():
    header = Header("foo.h")
    main = TranslationUnit("main.cpp", "main")
    other = TranslationUnit("foo.cpp", "foo")
    header.contexts[main] = [Context(index=0, include=1), Context(index=2, include=5)]
    header.contexts[other] = [Context(index=1, include=0)]
    return header, main, other


def test_get_index_finds_matching_include():
    header, main, other = make_header()
    assert header.get_index(main, 1) == 0
    assert header.get_index(main, 5) == 2
    assert header.get_index(other, 0) == 1


def test_get_index_missing_include():
    header, main, _ = make_header()
    assert header.get_index(main, 3) is None


def test_get_index_unknown_tu():
    header, _, _ = make_header()
    assert header.get_index(TranslationUnit("bar.cpp"), 1) is None


def test_header_context_validity():
    assert HeaderContext().valid() is False
    tu = TranslationUnit("main.cpp")
    assert HeaderContext(tu, Context(0, 0)).valid() is True


def test_translation_units_hash_by_identity():
    a = TranslationUnit("main.cpp")
    b = TranslationUnit("main.cpp")
    assert len({a, b}) == 2


def test_translation_unit_holds_headers():
    tu = TranslationUnit("main.cpp", mtime=timedelta(milliseconds=5))
    header = Header("foo.h")
    tu.headers.add(header)
    assert header in tu.headers
    assert tu.version == 0
    assert tu.mtime == timedelta(milliseconds=5)


def test_defaults_are_unset():
    assert Context() == Context(None, None)
    location = IncludeLocation(line=3)
    assert location.include is None and location.file is None


def test_header_index_and_independent_lists():
    header = Header("foo.h")
    header.indices.append(HeaderIndex("foo.h.1", 1, 2))
    assert Header("bar.h").indices == []
    assert header.indices[0].feature_hash == 2