"""
Name normalization shared by models and resolvers.
"""
from typing import Any


def squeeze_name(value: Any) -> str:
    """Trim surrounding whitespace and collapse internal runs to one space."""
    return " ".join(str(value).split())


def normalize_name(value: Any) -> str:
    """
    Comparison key for entity names.

    ``"  Pizza   PALACE "`` and ``"pizza palace"`` share the key
    ``"pizza palace"``. Only used for matching; stored names keep their case.
    """
    if value is None:
        return ""
    return squeeze_name(value).lower()
