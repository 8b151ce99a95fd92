"""
Filter expression compiler.

Turns a search request, the viewer's access record and the provider into a
Meilisearch filter expression, e.g.::

    provider = 'files' AND (owner = 'alice' OR users = 'alice' OR users = '__all')
        AND (metatags = 'a' OR metatags = 'b') AND subtags = 'x' AND subtags = 'y'

Every string interpolated into the expression goes through
`escape_filter_value`; that is the only injection defense for the filter
grammar.
"""

import re
from typing import Any, Iterable, List, Optional

import structlog

from ftsmeili.mapping.values import (
    first_int,
    is_scalar,
    normalize_scalar_values,
    to_bool,
    to_int,
    to_str,
)
from ftsmeili.models.document import DocumentAccess
from ftsmeili.models.search import CompareType, SearchRequest, SimpleQuery

logger = structlog.get_logger()

PUBLIC_ACCESS = "__all"

FILTERABLE_FIELDS = (
    "owner",
    "users",
    "groups",
    "circles",
    "links",
    "provider",
    "metatags",
    "subtags",
    "tags",
    "source",
    "lastModified",
)

_FIELD_PATTERN = re.compile(r"^[A-Za-z0-9_]+(?:\.[A-Za-z0-9_]+)*$")

_RANGE_OPERATORS = {
    CompareType.INT_GTE: ">=",
    CompareType.INT_LTE: "<=",
    CompareType.INT_GT: ">",
    CompareType.INT_LT: "<",
}


def escape_filter_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def quote(value: str) -> str:
    return "'" + escape_filter_value(value) + "'"


def build_filter_expression(request: SearchRequest, access: DocumentAccess, provider_id: str) -> str:
    filters = [f"provider = {quote(provider_id)}"]

    access_filter = build_access_filter(access)
    if access_filter:
        filters.append(f"({access_filter})")

    meta_filter = build_tag_filter("metatags", request.meta_tags)
    if meta_filter:
        filters.append(f"({meta_filter})")

    sub_filter = build_subtag_filter("subtags", request.sub_tags)
    if sub_filter:
        filters.append(sub_filter)

    simple_filter = build_simple_query_filter(request.simple_queries)
    if simple_filter:
        filters.append(simple_filter)

    since = to_int(request.get_option("since", 0))
    if since is not None and since > 0:
        filters.append(f"lastModified >= {since}")

    return " AND ".join(filters)


def build_access_filter(access: DocumentAccess) -> str:
    """Clauses are OR'ed: any single grant is enough to see a document."""
    parts = []
    viewer_id = access.viewer_id.strip()
    if viewer_id:
        parts.append(f"owner = {quote(viewer_id)}")
        parts.append(f"users = {quote(viewer_id)}")
    parts.append(f"users = {quote(PUBLIC_ACCESS)}")

    for field, values in (("groups", access.groups), ("circles", access.circles), ("links", access.links)):
        for value in values:
            if is_scalar(value):
                parts.append(f"{field} = {quote(to_str(value))}")

    return " OR ".join(_unique(parts))


def build_tag_filter(field: str, tags: Iterable[Any]) -> str:
    """A document matches if it carries any of the tags."""
    return " OR ".join(f"{field} = {quote(to_str(tag))}" for tag in tags if is_scalar(tag))


def build_subtag_filter(field: str, tags: Iterable[Any]) -> str:
    """A document matches only if it carries all of the tags."""
    return " AND ".join(f"{field} = {quote(to_str(tag))}" for tag in tags if is_scalar(tag))


def build_simple_query_filter(queries: Iterable[SimpleQuery]) -> str:
    parts = []
    for query in queries:
        expression = build_simple_query(query)
        if expression:
            parts.append(expression)
    return " AND ".join(parts)


def build_simple_query(query: SimpleQuery) -> str:
    """Compile one typed comparison; an empty string means the clause is dropped."""
    field = sanitize_filter_field(query.field)
    if field is None:
        logger.debug("simple_query_field_rejected", field=query.field)
        return ""

    values = normalize_scalar_values(query.values)
    if not values:
        return ""

    compare = query.type
    if compare in (CompareType.TEXT, CompareType.KEYWORD, CompareType.ARRAY):
        # No text operator in the filter grammar: exact match.
        return _any_of([f"{field} = {quote(to_str(value))}" for value in values])

    if compare == CompareType.INT_EQ:
        numbers = [to_int(value) for value in values]
        return _any_of([f"{field} = {number}" for number in numbers if number is not None])

    if compare in _RANGE_OPERATORS:
        number = first_int(values)
        if number is None:
            return ""
        return f"{field} {_RANGE_OPERATORS[compare]} {number}"

    if compare == CompareType.BOOL:
        flags = {flag for flag in (to_bool(value) for value in values) if flag is not None}
        if len(flags) != 1:
            # Nothing usable, or both true and false requested.
            return ""
        return f"{field} = {'true' if flags.pop() else 'false'}"

    logger.debug("simple_query_type_unsupported", field=field, type=compare.value)
    return ""


def sanitize_filter_field(field: str) -> Optional[str]:
    field = field.strip()
    if field == "" or not _FIELD_PATTERN.match(field):
        return None
    if field not in FILTERABLE_FIELDS:
        return None
    return field


def _any_of(clauses: List[str]) -> str:
    clauses = _unique(clauses)
    if not clauses:
        return ""
    if len(clauses) == 1:
        return clauses[0]
    return "(" + " OR ".join(clauses) + ")"


def _unique(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))
