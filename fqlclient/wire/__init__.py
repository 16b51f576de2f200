"""Wire format: tagged-type codec and query endpoint shapes."""

from fqlclient.wire.tagged import Tag, TaggedTypeFormat, infer_numeric_tag
from fqlclient.wire.protocol import (
    QueryFailure,
    QueryOptions,
    QueryRequest,
    QueryStats,
    QuerySuccess,
)

__all__ = [
    "Tag",
    "TaggedTypeFormat",
    "infer_numeric_tag",
    "QueryFailure",
    "QueryOptions",
    "QueryRequest",
    "QueryStats",
    "QuerySuccess",
]
