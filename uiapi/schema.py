"""
Declarative column schema of an exposed model

Models declare their schema in an `api_schema()` classmethod returning a dict:

    {
        "columns": {
            "name": {
                "label": {"en": "Name", "dv": "..."},
                "type": "string",
                "displayType": "text",
                "hidden": False,
                "sortable": True,
                "lang": ["en", "dv"],
                "filterable": {"type": "search", "label": "Name", "value": "name"},
                "validationRule": "required|string|max:255",
            },
        },
        "searchable": ["name"],
    }

The raw declaration is kept so `show` can return it as column metadata.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple
from .lang import normalize_langs


@dataclass(frozen=True)
class FilterDescriptor:
    """
    Filter control of a column
    :param mode: "self" (static items) or "relation" (items fetched from the related model)
    """

    type: str = "search"
    label: Any = None
    value: Optional[str] = None
    mode: str = "self"
    items: Tuple = ()
    relationship: Optional[str] = None
    item_title: Any = None
    item_value: Optional[str] = None

    @classmethod
    def from_dict(cls, definition: Mapping) -> "FilterDescriptor":
        items = definition.get("items")
        return cls(
            type=str(definition.get("type") or "search"),
            label=definition.get("label"),
            value=definition.get("value") or None,
            mode=str(definition.get("mode") or "self"),
            items=tuple(items) if isinstance(items, (list, tuple)) else (),
            relationship=definition.get("relationship") or None,
            item_title=definition.get("itemTitle"),
            item_value=definition.get("itemValue") or None,
        )


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    key: str
    label: Any = None
    type: Any = None
    display_type: Any = None
    display_props: Any = None
    inline_editable: Any = None
    hidden: bool = False
    sortable: bool = False
    lang: Optional[Tuple[str, ...]] = None
    filterable: Optional[FilterDescriptor] = None
    relation_label: Any = None
    validation_rule: Any = None
    definition: Dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, name: str, definition: Any) -> "ColumnDescriptor":
        if not isinstance(definition, Mapping):
            definition = {}
        filterable = definition.get("filterable")
        return cls(
            name=name,
            key=str(definition.get("key") or name),
            label=definition.get("label"),
            type=definition.get("type"),
            display_type=definition.get("displayType"),
            display_props=definition.get("displayProps"),
            inline_editable=definition.get("inlineEditable"),
            hidden=bool(definition.get("hidden", False)),
            sortable=bool(definition.get("sortable", False)),
            lang=normalize_langs(definition.get("lang")),
            filterable=FilterDescriptor.from_dict(filterable) if isinstance(filterable, Mapping) else None,
            relation_label=definition.get("relationLabel"),
            validation_rule=definition.get("validationRule"),
            definition=dict(definition),
        )


class EntitySchema:
    """
    Ordered collection of column descriptors, keyed by field name
    """

    def __init__(self, columns: Dict[str, ColumnDescriptor], searchable=(), raw_columns=None):
        self.columns = columns
        self.searchable = tuple(searchable)
        self.raw_columns = raw_columns if raw_columns is not None else {}

    @classmethod
    def from_dict(cls, declaration: Any) -> "EntitySchema":
        if not isinstance(declaration, Mapping):
            declaration = {}
        raw_columns = declaration.get("columns")
        if not isinstance(raw_columns, Mapping):
            raw_columns = {}
        columns = {str(name): ColumnDescriptor.from_dict(str(name), definition) for name, definition in raw_columns.items()}
        searchable = [name for name in declaration.get("searchable") or [] if isinstance(name, str)]
        return cls(columns, searchable, dict(raw_columns))

    def __contains__(self, name) -> bool:
        return name in self.columns

    def __iter__(self):
        return iter(self.columns.values())

    def get(self, name) -> Optional[ColumnDescriptor]:
        return self.columns.get(name)

    @property
    def column_names(self) -> list:
        return list(self.columns)

    def __repr__(self):  # pragma: no cover
        return f"<EntitySchema {self.column_names}>"


def get_schema(model_cls) -> Optional[EntitySchema]:
    """
    :param model_cls: exposed model class
    :return: the parsed schema, None if the class doesn't declare one
    """
    declare = getattr(model_cls, "api_schema", None)
    if not callable(declare):
        return None
    return EntitySchema.from_dict(declare())
