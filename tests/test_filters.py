"""
Tests for include/exclude filtering over metadata and text.
"""

import pytest
from pydantic import ValidationError

from vector_storage.core.schemas import FilterCriteria, FilterOptions
from vector_storage.vector.filters import filter_documents, matches
from vector_storage.vector.types import Document


def make_doc(text, **metadata):
    return Document(text=text, metadata=metadata, timestamp=0)


@pytest.fixture
def docs():
    return [
        make_doc("a", flag=True, lang="en"),
        make_doc("b", flag=False, lang="en"),
        make_doc("c", flag=True, lang="de"),
        make_doc("d", lang="en"),
    ]


def texts_of(documents):
    return [doc.text for doc in documents]


def test_no_options_returns_everything_in_order(docs):
    """Without options every document passes, order unchanged."""
    assert texts_of(filter_documents(docs)) == ["a", "b", "c", "d"]
    assert texts_of(filter_documents(docs, FilterOptions())) == ["a", "b", "c", "d"]


def test_include_text_and_exclude_metadata(docs):
    """Text must be a or b, and flag must not be True."""
    options = {"include": {"text": ["a", "b"]}, "exclude": {"metadata": {"flag": True}}}

    assert texts_of(filter_documents(docs, options)) == ["b"]


def test_include_single_text_value(docs):
    assert texts_of(filter_documents(docs, {"include": {"text": "c"}})) == ["c"]


def test_include_metadata_requires_all_keys(docs):
    options = FilterOptions(include=FilterCriteria(metadata={"flag": True, "lang": "en"}))

    assert texts_of(filter_documents(docs, options)) == ["a"]


def test_criteria_is_a_conjunction(docs):
    """Metadata and text conditions must both hold."""
    criteria = {"metadata": {"lang": "en"}, "text": ["a", "c"]}

    assert [matches(doc, criteria) for doc in docs] == [True, False, False, False]


def test_missing_metadata_key_does_not_match(docs):
    """Document d has no flag, so it never matches a flag criterion."""
    assert not matches(docs[3], {"metadata": {"flag": False}})
    assert not matches(docs[3], {"metadata": {"flag": None}})


def test_missing_key_passes_exclude(docs):
    options = {"exclude": {"metadata": {"flag": True}}}

    assert texts_of(filter_documents(docs, options)) == ["b", "d"]


def test_boolean_does_not_equal_integer():
    doc = make_doc("n", flag=1)

    assert not matches(doc, {"metadata": {"flag": True}})
    assert matches(doc, {"metadata": {"flag": 1}})


def test_empty_criteria_match_everything(docs):
    assert all(matches(doc, FilterCriteria()) for doc in docs)


def test_empty_text_list_matches_nothing(docs):
    assert filter_documents(docs, {"include": {"text": []}}) == []


def test_attribute_metadata_is_supported():
    class Meta:
        source = "wiki"

    doc = Document(text="obj", metadata=Meta(), timestamp=0)

    assert matches(doc, {"metadata": {"source": "wiki"}})
    assert not matches(doc, {"metadata": {"source": "news"}})


def test_filter_does_not_mutate_input(docs):
    original = list(docs)
    filter_documents(docs, {"exclude": {"text": "a"}})

    assert docs == original


def test_unknown_option_keys_are_rejected(docs):
    with pytest.raises(ValidationError):
        filter_documents(docs, {"includes": {"text": "a"}})
