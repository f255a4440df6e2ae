"""
View configs and component (layout) configs are json documents stored on disk:

    <VIEW_CONFIG_DIR>/<model>.json

        {
            "listView": {
                "columns": ["id", "name", "country.name_eng"],
                "lang": ["en", "dv"],
                "filters": ["gender", "country_id"],
                "columnCustomizations": {"name": {"sortable": true, "title": {"en": "Full name"}}},
                "per_page": 10
            }
        }

    <COMPONENT_CONFIG_DIR>/<key>.json

        {
            "table": {"headers": "on", "pagination": "on", "datalink": "off", "toolbar": {"filters": "on"}}
        }

Documents are read on every request, edits are picked up without a restart.
"""
import json
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union
import uiapi
from .errors import GenericError, MissingParameter, ViewConfigError
from .lang import normalize_langs, is_lang_allowed
from .util import split_csv

# document keys are used as file names
KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")

ON = "on"
OFF = "off"


class JsonDocumentStore:
    """
    Loads json documents by key from a directory
    """

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def path(self, key: str) -> Optional[str]:
        if not isinstance(key, str) or not KEY_PATTERN.match(key):
            uiapi.log.warning(f"Invalid config document key '{key}'")
            return None
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> dict:
        """
        :return: the parsed document, an empty dict if it doesn't exist
        """
        path = self.path(key)
        if path is None or not os.path.isfile(path):
            uiapi.log.debug(f"Config document '{key}' not found in {self.directory}")
            return {}
        try:
            with open(path, encoding="utf-8") as doc_file:
                document = json.load(doc_file)
        except ValueError as exc:
            raise GenericError(f"Invalid json in {path}: {exc}")
        if not isinstance(document, dict):
            uiapi.log.warning(f"Config document {path} is not a json object")
            return {}
        return document


@dataclass(frozen=True)
class ComponentBlock:
    """
    One entry of a model's view config
    """

    key: str
    columns: Tuple[str, ...] = ()
    lang: Optional[Tuple[str, ...]] = None
    filters: Optional[Tuple[str, ...]] = None
    column_customizations: Dict[str, Any] = field(default_factory=dict)
    per_page: Optional[int] = None

    @classmethod
    def from_dict(cls, key: str, block: Any) -> "ComponentBlock":
        if not isinstance(block, Mapping):
            block = {}
        columns = block.get("columns")
        if isinstance(columns, str):
            columns = split_csv(columns)
        filters = block.get("filters")
        customizations = block.get("columnCustomizations")
        per_page = block.get("per_page")
        return cls(
            key=key,
            columns=tuple(str(column) for column in columns or ()),
            lang=normalize_langs(block.get("lang")),
            filters=tuple(str(name) for name in filters) if isinstance(filters, (list, tuple)) else None,
            column_customizations=dict(customizations) if isinstance(customizations, Mapping) else {},
            per_page=per_page if isinstance(per_page, int) and not isinstance(per_page, bool) and per_page > 0 else None,
        )

    def allows_lang(self, lang: str) -> bool:
        return is_lang_allowed(self.lang, lang)

    @property
    def columns_param(self) -> str:
        return ",".join(self.columns)


def resolve_component(store: JsonDocumentStore, model_name: str, component_key, columns_param=None):
    """
    :param store: view config store
    :param model_name: model name as requested, the view config key is its lowercase form
    :param component_key: component requested by the client
    :param columns_param: columns requested by the client
    :return: (ComponentBlock, columns), columns default to the component's columns
    """
    if component_key is None or not str(component_key).strip():
        raise MissingParameter("component parameter is required")
    component_key = str(component_key).strip()

    view_config = store.load(str(model_name).lower())
    if not view_config:
        raise ViewConfigError("view config file missing for model")
    if component_key not in view_config:
        raise ViewConfigError("component key not found in view config")

    block = ComponentBlock.from_dict(component_key, view_config[component_key])
    if columns_param is None or not str(columns_param).strip():
        if not block.columns:
            raise ViewConfigError("columns not defined in view config for component")
        columns_param = block.columns_param
    return block, columns_param


#
# Layout trees: component configs are parsed into Toggle, Passthrough and Node values
#
@dataclass(frozen=True)
class Toggle:
    """A literal "on" or "off" value"""

    on: bool

    @property
    def raw(self) -> str:
        return ON if self.on else OFF


@dataclass(frozen=True)
class Passthrough:
    """Any other value, emitted unchanged"""

    value: Any


@dataclass(frozen=True)
class Node:
    """Ordered mapping of keys to layout values"""

    children: Tuple[Tuple[str, "LayoutValue"], ...] = ()

    def get(self, key: str) -> Optional["LayoutValue"]:
        for child_key, child in self.children:
            if child_key == key:
                return child
        return None


LayoutValue = Union[Toggle, Passthrough, Node]


def parse_layout(value: Any) -> LayoutValue:
    if isinstance(value, Mapping):
        return Node(tuple((str(key), parse_layout(child)) for key, child in value.items()))
    if value == ON or value == OFF:
        return Toggle(value == ON)
    return Passthrough(value)


def load_layout(store: JsonDocumentStore, key: str) -> Optional[Node]:
    """
    :return: the parsed component config or None when it's missing or empty
    """
    document = store.load(key)
    if not document:
        return None
    return parse_layout(document)
