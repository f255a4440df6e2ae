"""
Parsing of the `columns`, `filter`, `sort` and `with` query arguments

Column tokens are either a field of the model ("name") or a field of a related model
("country.name_eng"). Tokens keep the alias as written by the client, the resolved
relation names are returned separately so they can be eager loaded.
"""
from typing import Dict, List, Optional, Tuple
import uiapi
from .errors import InvalidToken, UnknownColumn, InvalidFilterSegment, UnknownFilterField, UnknownSortField
from .lang import supports_lang
from .relations import resolve_relation
from .schema import EntitySchema, get_schema
from .util import split_csv, unique

ASC = "asc"
DESC = "desc"


def parse_columns(model_cls, schema: EntitySchema, raw) -> Tuple[Optional[List[str]], List[str]]:
    """
    :param model_cls: model the columns are requested for
    :param schema: schema of model_cls
    :param raw: comma separated column tokens
    :return: (tokens, relation names), tokens is None when no columns were given
    """
    segments = split_csv(raw)
    if not segments:
        return None, []

    tokens = []
    relations = []
    for token in segments:
        if "." not in token:
            if token not in schema:
                raise UnknownColumn(f"Column '{token}' is not defined in schema")
            tokens.append(token)
            continue

        alias, rest = token.split(".", 1)
        if not alias or not rest:
            raise InvalidToken(f"Invalid columns segment '{token}'")
        relation = resolve_relation(model_cls, alias)
        if relation is None:
            raise InvalidToken(f"Unknown relation reference '{alias}' in columns")
        related_schema = get_schema(relation.related)
        if related_schema is None:
            raise InvalidToken(f"Related model for '{relation.name}' lacks schema")
        if rest not in related_schema:
            raise UnknownColumn(f"Column '{rest}' is not defined in {relation.name} schema")
        tokens.append(token)
        relations.append(relation.name)

    return unique(tokens), unique(relations)


def parse_filters(raw, schema: EntitySchema) -> Dict[str, object]:
    """
    filter=gender:M,name:Jo*  => {"gender": "M", "name": {"like": "Jo%"}}

    :return: field => literal value or {"like": pattern}
    """
    result = {}
    for pair in split_csv(raw):
        if ":" not in pair:
            raise InvalidFilterSegment(f"Invalid filter segment '{pair}'")
        field, value = (part.strip() for part in pair.split(":", 1))
        if not field:
            raise InvalidFilterSegment(f"Invalid filter segment '{pair}'")
        if field not in schema:
            raise UnknownFilterField(f"Filter field '{field}' is not defined in schema")
        if "*" in value:
            result[field] = {"like": value.replace("*", "%")}
        else:
            result[field] = value
    return result


def parse_sorts(raw, schema: EntitySchema, tokens: Optional[List[str]] = None) -> List[Tuple[str, str]]:
    """
    sort=-created_at,country.name_eng  => [("created_at", "desc"), ("country.name_eng", "asc")]

    Relation qualified sort fields have to be part of the requested column tokens
    """
    result = []
    for segment in split_csv(raw):
        direction = DESC if segment.startswith("-") else ASC
        field = segment.lstrip("-").strip()
        if "." in field:
            if field not in (tokens or []):
                raise UnknownSortField(f"Sort field '{field}' is not defined in columns")
        elif field not in schema:
            raise UnknownSortField(f"Sort field '{field}' is not defined in schema")
        result.append((field, direction))
    return result


def parse_with(model_cls, raw) -> List[str]:
    """
    :param raw: list or comma separated string of relation paths, eg. country,entries.entryType
    :return: paths whose first segment names a relation, with the resolved relation name
    """
    if isinstance(raw, str):
        raw = split_csv(raw)
    result = []
    for path in raw or []:
        first, _, rest = path.partition(".")
        relation = resolve_relation(model_cls, first)
        if relation is None:
            uiapi.log.warning(f"{model_cls.__name__}: ignoring unknown relation '{first}' in with")
            continue
        result.append(f"{relation.name}.{rest}" if rest else relation.name)
    return unique(result)


def filter_tokens_by_lang(model_cls, schema: EntitySchema, tokens: List[str], lang: str) -> List[str]:
    """
    Keep the tokens whose column supports the requested language
    Related fields are checked against the related schema, unresolvable tokens are dropped
    """
    result = []
    for token in tokens:
        if "." in token:
            alias, rest = token.split(".", 1)
            relation = resolve_relation(model_cls, alias) if rest else None
            related_schema = get_schema(relation.related) if relation else None
            column = related_schema.get(rest) if related_schema else None
        else:
            column = schema.get(token)
        if column is not None and supports_lang(column.lang, lang):
            result.append(token)
    return result
