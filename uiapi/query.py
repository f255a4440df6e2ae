"""
Query construction: eager loading, filters, search, sorting and pagination
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import joinedload, selectinload, aliased, Query
import uiapi
from .attr_parse import coerce_value
from .config import get_int_config
from .relations import relation_table, resolve_relation
from .tokens import DESC

EAGER_LOADABLE = ("select", "joined", "subquery", "selectin")


def create_query(cls, relations: List[str] = ()) -> Query:
    """
    Create a query for the target collection `cls`.
    The requested relationships will be eager loaded if possible:
    to-one relations are joined, to-many relations are selectin loaded
    See: https://docs.sqlalchemy.org/en/20/orm/queryguide/relationships.html

    :param cls: class (collection) we want to query
    :param relations: relation paths, eg. ["country", "entries.entryType"]
    """
    query = cls._s_query

    for path in relations:
        current_cls = cls
        options = None
        for rel_name in path.split("."):
            relation = relation_table(current_cls).get(rel_name)
            if relation is None:
                uiapi.log.warning(f"Invalid relationship : {current_cls.__name__}.{rel_name}")
                break
            if relation.lazy not in EAGER_LOADABLE:
                # we can't set options for lazy_load 'dynamic'/'raise'/'noload' relationships
                break
            rel_attr = getattr(current_cls, rel_name)
            if relation.is_to_one:
                options = options.joinedload(rel_attr) if options else joinedload(rel_attr)
            else:
                options = options.selectinload(rel_attr) if options else selectinload(rel_attr)
            current_cls = relation.related
        if options:
            query = query.options(options)

    return query


def apply_filters(query: Query, cls, filters: Dict[str, object]) -> Query:
    """
    :param filters: field => literal value or {"like": pattern}
    """
    columns = cls._s_column_attrs
    for field, value in filters.items():
        if field not in columns:
            uiapi.log.warning(f"{cls.__name__}.{field} is not a mapped column, filter ignored")
            continue
        attr = getattr(cls, field)
        if isinstance(value, dict):
            query = query.filter(attr.like(value["like"]))
        else:
            query = query.filter(attr == coerce_value(columns[field], value))
    return query


def apply_search(query: Query, cls, q, searchable) -> Query:
    """
    Match `q` anywhere in any of the searchable columns
    """
    if not q:
        return query
    columns = cls._s_column_attrs
    expressions = [getattr(cls, field).like(f"%{q}%") for field in searchable if field in columns]
    if not expressions:
        return query
    return query.filter(or_(*expressions))


def apply_sorts(query: Query, cls, sorts: List[Tuple[str, str]]) -> Query:
    """
    :param sorts: (field, direction) tuples, "alias.field" sorts by a to-one related column
    """
    columns = cls._s_column_attrs
    for field, direction in sorts:
        if "." in field:
            alias, rel_field = field.split(".", 1)
            relation = resolve_relation(cls, alias)
            if relation is None or not relation.is_to_one:
                uiapi.log.debug(f"Sorting by {field} is only supported for to-one relations")
                continue
            target = aliased(relation.related)
            attr = getattr(target, rel_field, None)
            if attr is None or rel_field not in relation.related._s_column_attrs:
                uiapi.log.warning(f"Can't sort by {field}")
                continue
            query = query.outerjoin(getattr(cls, relation.name).of_type(target))
        else:
            if field not in columns:
                uiapi.log.warning(f"{cls.__name__}.{field} is not a mapped column, sort ignored")
                continue
            attr = getattr(cls, field)
        query = query.order_by(attr.desc() if direction == DESC else attr.asc())
    return query


@dataclass(frozen=True)
class Page:
    items: list
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


def paginate(query: Query, page=None, per_page=None) -> Page:
    """
    this is where the query is executed

    :param query: SQLAlchemy query object
    :param page: 1 based page number
    :param per_page: page size, clamped to [1, MAX_PAGE_LIMIT]
    :return: Page
    """
    max_limit = get_int_config("MAX_PAGE_LIMIT", 1000)
    per_page = per_page if per_page is not None else get_int_config("DEFAULT_PER_PAGE", 25)
    per_page = min(max(per_page, 1), max_limit)
    page = max(page or 1, 1)

    total = query.order_by(None).count()
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return Page(items, total, page, per_page)
