"""
Relation descriptors derived from the SQLAlchemy mapper, and the name resolution
used for "alias.field" column tokens, sort fields and `with` paths:

    1. the name as written
    2. its camelCase form (entry_type => entryType)
    3. for names ending in _id, the camelCase form of the stripped name (country_id => country)
    4. the stripped name as written
"""
from dataclasses import dataclass
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.orm.interfaces import MANYTOONE
from typing import Dict, Optional
import uiapi
from .util import camel_case

TOONE = "toone"
TOMANY = "tomany"


@dataclass(frozen=True)
class RelationDescriptor:
    name: str
    related: type
    cardinality: str
    lazy: str = "select"

    @property
    def is_to_one(self) -> bool:
        return self.cardinality == TOONE


def relation_table(model_cls) -> Dict[str, RelationDescriptor]:
    """
    :param model_cls: mapped model class
    :return: relation name => RelationDescriptor, empty if the class isn't mapped
    """
    mapper = sqla_inspect(model_cls, raiseerr=False)
    if mapper is None or not hasattr(mapper, "relationships"):
        return {}
    result = {}
    for rel in mapper.relationships:
        to_one = rel.direction == MANYTOONE or not rel.uselist
        result[rel.key] = RelationDescriptor(rel.key, rel.mapper.class_, TOONE if to_one else TOMANY, str(rel.lazy))
    return result


def candidate_names(name: str) -> list:
    """
    :return: relation names tried, in order, for a token's first segment
    """
    candidates = [name, camel_case(name)]
    if name.endswith("_id") and len(name) > 3:
        stripped = name[:-3]
        candidates += [camel_case(stripped), stripped]
    return list(dict.fromkeys(candidates))


def resolve_relation(model_cls, name: str) -> Optional[RelationDescriptor]:
    """
    :param model_cls: the model owning the relation
    :param name: alias as written by the client
    :return: RelationDescriptor or None if no candidate names a relation
    """
    if not name:
        return None
    relations = relation_table(model_cls)
    for candidate in candidate_names(name):
        relation = relations.get(candidate)
        if relation is not None:
            if candidate != name:
                uiapi.log.debug(f"{model_cls.__name__}: relation alias '{name}' resolved to '{candidate}'")
            return relation
    return None
