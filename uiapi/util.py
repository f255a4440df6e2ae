#
# Helpers shared by the schema, relation and metadata modules
#
import re
from typing import Callable


class ClassPropertyDescriptor:
    """
    ClassPropertyDescriptor
    """

    def __init__(self, fget: classmethod) -> None:
        self.fget = fget

    def __get__(self, obj, klass=None):
        if klass is None:
            klass = type(obj)
        return self.fget.__get__(obj, klass)()


def classproperty(func: Callable) -> ClassPropertyDescriptor:
    """
    classproperty, read-only
    """
    if not isinstance(func, (classmethod, staticmethod)):
        func = classmethod(func)

    return ClassPropertyDescriptor(func)


def camel_case(value: str) -> str:
    """
    entry_type, entry-type and "entry type" all become entryType
    """
    words = [word for word in re.split(r"[-_\s]+", value) if word]
    studly = "".join(word[:1].upper() + word[1:] for word in words)
    return studly[:1].lower() + studly[1:]


def headline(field: str) -> str:
    """
    Derive a human readable title from a field name: date_of_birth => Date Of Birth
    """
    return field.replace("_", " ").title()


def split_csv(raw) -> list:
    """
    Split a comma separated query argument, trimming segments and dropping empty ones
    """
    if raw is None:
        return []
    return [segment.strip() for segment in str(raw).split(",") if segment.strip()]


def unique(items) -> list:
    """order preserving deduplication"""
    return list(dict.fromkeys(items))
