"""
Record shaping: order the record fields like the requested column tokens

    flat:   {"id": 1, "country.name_eng": "Maldives"}
    nested: {"id": 1, "country": {"name_eng": "Maldives"}}
"""
from typing import List, Optional


def reorder_record(record: dict, tokens: Optional[List[str]]) -> dict:
    """
    Flat mode: keys in token order, dotted keys kept literally.
    With tokens None the record is returned unchanged, an empty token list gives an empty record
    """
    if tokens is None:
        return record
    return {token: record[token] for token in tokens if token in record}


def nest_record(record: dict, tokens: List[str]) -> dict:
    """
    Nested mode: "alias.field" values are grouped in an object named after the alias,
    the alias object takes the position of its first token
    """
    result = {}
    for token in tokens:
        if token not in record:
            continue
        if "." in token:
            alias, field = token.split(".", 1)
            group = result.setdefault(alias, {})
            if isinstance(group, dict):
                group[field] = record[token]
        else:
            result[token] = record[token]
    return result


def format_record(record: dict, tokens: List[str], nested: bool = True) -> dict:
    if nested:
        return nest_record(record, tokens)
    return reorder_record(record, tokens)
