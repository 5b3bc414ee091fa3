from core.models import TagFilter
from core.services.tag_filter import encode_tag_filter, parse_tag_filter


def test_parse_required_and_excluded():
    f = parse_tag_filter("cat&-dog")
    assert f.required == {"cat"}
    assert f.excluded == {"dog"}


def test_values_and_leading_question_mark_ignored():
    assert parse_tag_filter("?cat=1&-dog=") == parse_tag_filter("cat&-dog")


def test_empty_query():
    assert parse_tag_filter("").is_empty
    assert parse_tag_filter(None).is_empty
    assert parse_tag_filter("-").is_empty


def test_encode_is_canonical():
    f = TagFilter.from_terms(["zebra", "-b", "apple", "-a"])
    assert encode_tag_filter(f) == "apple&zebra&-a&-b"
    assert parse_tag_filter(encode_tag_filter(f)) == f


def test_encode_quotes_special_characters():
    f = TagFilter.from_terms(["new york", "a&b"])
    query = encode_tag_filter(f)
    assert query == "a%26b&new%20york"
    assert parse_tag_filter(query) == f


def test_matches():
    f = TagFilter.from_terms(["cat", "-dog"])
    assert f.matches({"cat"})
    assert f.matches(["cat", "bird"])
    assert not f.matches({"cat", "dog"})
    assert not f.matches(set())
    assert TagFilter().matches(set())


def test_required_tag_with_leading_dash_survives_encoding():
    f = TagFilter(required=frozenset({"-x", "cat"}), excluded=frozenset({"-y"}))
    query = encode_tag_filter(f)
    assert query == "%2Dx&cat&--y"
    assert parse_tag_filter(query) == f
