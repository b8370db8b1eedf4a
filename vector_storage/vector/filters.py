"""
Include/exclude predicates over document metadata and text.
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence, Union

from ..core.schemas import FilterCriteria, FilterOptions
from .types import Document

_MISSING = object()


def _metadata_value(metadata: Any, key: str) -> Any:
    if isinstance(metadata, Mapping):
        return metadata.get(key, _MISSING)
    return getattr(metadata, key, _MISSING)


def _values_equal(actual: Any, expected: Any) -> bool:
    if actual is _MISSING:
        return False
    # bool is an int subclass; True must not match 1
    if isinstance(actual, bool) or isinstance(expected, bool):
        return type(actual) is type(expected) and actual == expected
    return actual == expected


def _as_criteria(criteria: Union[FilterCriteria, Mapping]) -> FilterCriteria:
    if isinstance(criteria, FilterCriteria):
        return criteria
    return FilterCriteria.model_validate(criteria)


def _as_options(options: Union[FilterOptions, Mapping, None]) -> Optional[FilterOptions]:
    if options is None or isinstance(options, FilterOptions):
        return options
    return FilterOptions.model_validate(options)


def matches(document: Document, criteria: Union[FilterCriteria, Mapping]) -> bool:
    """Check whether a document satisfies every condition in criteria."""
    criteria = _as_criteria(criteria)

    if criteria.metadata:
        for key, expected in criteria.metadata.items():
            if not _values_equal(_metadata_value(document.metadata, key), expected):
                return False

    texts = criteria.text_values()
    if texts is not None and document.text not in texts:
        return False

    return True


def filter_documents(documents: Sequence[Document],
                     options: Union[FilterOptions, Mapping, None] = None) -> List[Document]:
    """
    Return the documents passing the include and exclude criteria.

    Relative order of the input is preserved. With no options every document passes.
    """
    options = _as_options(options)
    filtered = list(documents)
    if options is None:
        return filtered

    if options.include is not None:
        filtered = [doc for doc in filtered if matches(doc, options.include)]
    if options.exclude is not None:
        filtered = [doc for doc in filtered if not matches(doc, options.exclude)]

    return filtered
