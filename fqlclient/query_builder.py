"""Composable query templates.

A query is a sequence of literal text fragments with values interpolated
between them. Interpolated values never become query text: literals travel
as encoded values and nested builders are rendered as sub-queries.

Usage:
    from fqlclient.query_builder import fql, fql_template

    by_genre = fql(["Authors.byGenre(", ")"], "sci-fi")
    q = fql(["", " { firstName, lastName }"], by_genre)

    # or, with named placeholders
    q = fql_template("Authors.create(${author})", author={"firstName": "a"})

    request = q.to_query()
    request.to_body()  # {"query": {"fql": [...]}, "arguments": {...}}
"""

from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from fqlclient.errors import QueryTemplateError
from fqlclient.wire.protocol import QueryOptions, QueryRequest
from fqlclient.wire.tagged import TaggedTypeFormat

_PLACEHOLDER = re.compile(r"\$\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}")


@dataclass(frozen=True)
class Literal:
    """A value encoded through the tagged-type codec."""
    value: Any


@dataclass(frozen=True)
class SubQuery:
    """A nested builder rendered in place."""
    builder: "QueryBuilder"


Interpolation = Union[Literal, SubQuery]


def _as_interpolation(arg: Any) -> Interpolation:
    if isinstance(arg, (Literal, SubQuery)):
        return arg
    if isinstance(arg, QueryBuilder):
        return SubQuery(arg)
    return Literal(arg)


class QueryBuilder:
    """Query template: ``len(fragments) == len(args) + 1``.

    Args:
        fragments: Literal text pieces, or a single string for a query with
            no interpolations
        *args: Values placed between consecutive fragments; a QueryBuilder
            becomes a sub-query, anything else a literal

    Raises:
        QueryTemplateError: If the counts do not line up.
    """

    def __init__(self, fragments: Union[str, Sequence[str]], *args: Any):
        if isinstance(fragments, str):
            fragments = (fragments,)
        fragments = tuple(fragments)
        if len(fragments) == 0 or len(fragments) != len(args) + 1:
            raise QueryTemplateError(
                f"invalid query constructed: {len(fragments)} fragments "
                f"for {len(args)} interpolations"
            )
        for fragment in fragments:
            if not isinstance(fragment, str):
                raise QueryTemplateError(
                    f"query fragments must be strings, got {type(fragment).__name__}"
                )
        self._fragments: Tuple[str, ...] = fragments
        self._interpolations: Tuple[Interpolation, ...] = tuple(
            _as_interpolation(arg) for arg in args
        )

    @property
    def fragments(self) -> Tuple[str, ...]:
        return self._fragments

    @property
    def interpolations(self) -> Tuple[Interpolation, ...]:
        return self._interpolations

    def to_query(self, options: Optional[QueryOptions] = None) -> QueryRequest:
        """Render into a fresh QueryRequest carrying ``options``.

        Literal arguments are named ``arg0``, ``arg1``, ... in source order
        across the whole tree of nested builders, so rendering the same
        builder twice yields equal requests.
        """
        query, arguments = self._render(itertools.count())
        return QueryRequest(
            query=query,
            arguments=arguments,
            options=options or QueryOptions(),
        )

    def _render(self, counter: Iterator[int]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        if len(self._fragments) == 1:
            return {"fql": [self._fragments[0]]}, {}

        tokens: List[Any] = []
        arguments: Dict[str, Any] = {}
        for fragment, interpolation in zip(self._fragments, self._interpolations):
            if fragment:
                tokens.append(fragment)
            if isinstance(interpolation, SubQuery):
                sub_query, sub_arguments = interpolation.builder._render(counter)
                tokens.append(sub_query)
                arguments.update(sub_arguments)
            else:
                encoded = TaggedTypeFormat.encode(interpolation.value)
                arguments[f"arg{next(counter)}"] = encoded
                tokens.append({"value": encoded})

        if self._fragments[-1]:
            tokens.append(self._fragments[-1])
        return {"fql": tokens}, arguments

    def __repr__(self) -> str:
        return (
            f"QueryBuilder(fragments={list(self._fragments)!r}, "
            f"interpolations={list(self._interpolations)!r})"
        )


def fql(fragments: Union[str, Sequence[str]], *args: Any) -> QueryBuilder:
    """Build a query from fragments and the values between them."""
    return QueryBuilder(fragments, *args)


def fql_template(template: str, **values: Any) -> QueryBuilder:
    """Build a query from ``${name}`` placeholders filled from ``values``.

    Raises:
        QueryTemplateError: A placeholder has no value, or a value is unused.
    """
    parts = _PLACEHOLDER.split(template)
    # split() alternates text, name, text, name, ..., text
    fragments = parts[0::2]
    names = parts[1::2]

    missing = sorted(set(names) - set(values))
    if missing:
        raise QueryTemplateError(f"no value supplied for placeholders: {missing}")
    unused = sorted(set(values) - set(names))
    if unused:
        raise QueryTemplateError(f"values not used by the template: {unused}")

    return QueryBuilder(fragments, *(values[name] for name in names))


__all__ = [
    "Interpolation",
    "Literal",
    "QueryBuilder",
    "SubQuery",
    "fql",
    "fql_template",
]
