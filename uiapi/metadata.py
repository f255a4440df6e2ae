"""
Header, filter, pagination and datalink metadata sent along with the records,
and the component settings tree built from a layout config
"""
from collections.abc import Mapping
from typing import Callable, Dict, List, Optional
import uiapi
from .config import api_url
from .lang import resolve_label, label_for, header_lang_override
from .relations import resolve_relation
from .schema import ColumnDescriptor, EntitySchema, get_schema
from .tokens import filter_tokens_by_lang
from .util import headline, unique
from .view_config import JsonDocumentStore, Node, Toggle, load_layout

SECTIONS = ("headers", "filters", "pagination", "datalink")
PREFERRED_TITLE_FIELDS = ("name", "name_eng", "title")
CUSTOMIZED_HEADER_KEYS = ("sortable", "hidden", "type", "displayType", "displayProps", "inlineEditable", "editable")


def customized_title(customizations: Optional[Mapping], token: str, lang: str) -> Optional[str]:
    custom = customizations.get(token) if isinstance(customizations, Mapping) else None
    if not isinstance(custom, Mapping):
        return None
    return resolve_label(custom.get("title"), lang, first_entry=True)


def apply_customization(header: dict, custom) -> dict:
    """
    Named keys are always overridden, any other key is only added when the header doesn't set it
    """
    if not isinstance(custom, Mapping):
        return header
    if "sortable" in custom:
        header["sortable"] = bool(custom["sortable"])
    if "hidden" in custom:
        header["hidden"] = bool(custom["hidden"])
    if "type" in custom:
        header["type"] = str(custom["type"])
    if "displayType" in custom:
        header["displayType"] = str(custom["displayType"])
    if isinstance(custom.get("displayProps"), (Mapping, list)):
        header["displayProps"] = custom["displayProps"]
    if "inlineEditable" in custom:
        header["inlineEditable"] = bool(custom["inlineEditable"])
    if "editable" in custom:
        header["inlineEditable"] = bool(custom["editable"])
    for key, value in custom.items():
        if key in ("title", "value") or key in CUSTOMIZED_HEADER_KEYS or key in header:
            continue
        header[key] = value
    return header


def column_header(column: ColumnDescriptor, title: str, value: str, lang: str) -> dict:
    header = {
        "title": title,
        "value": value,
        "sortable": column.sortable,
        "hidden": column.hidden,
    }
    if "type" in column.definition:
        header["type"] = str(column.type)
    if "displayType" in column.definition:
        header["displayType"] = str(column.display_type)
    if isinstance(column.display_props, (Mapping, list)):
        header["displayProps"] = column.display_props
    if "inlineEditable" in column.definition:
        header["inlineEditable"] = bool(column.inline_editable)
    lang_hint = header_lang_override(column, lang)
    if lang_hint is not None:
        header["lang"] = lang_hint
    return header


def build_headers(
    model_cls,
    schema: EntitySchema,
    tokens: Optional[List[str]],
    lang: str,
    customizations: Optional[Mapping] = None,
    include_hidden: bool = False,
) -> List[dict]:
    """
    :param model_cls: model the headers are built for
    :param schema: schema of model_cls
    :param tokens: requested column tokens, all schema columns if empty
    :param lang: requested language
    :param customizations: columnCustomizations of the view config component
    :param include_hidden: include columns declared hidden
    :return: list of header dicts, in token order
    """
    fields = unique(tokens) if tokens else schema.column_names
    fields = filter_tokens_by_lang(model_cls, schema, fields, lang)
    customizations = customizations if isinstance(customizations, Mapping) else {}

    headers = []
    for token in fields:
        title = customized_title(customizations, token, lang)
        if "." in token:
            alias, rest = token.split(".", 1)
            relation = resolve_relation(model_cls, alias)
            related_schema = get_schema(relation.related) if relation else None
            column = related_schema.get(rest) if related_schema else None
            if column is None:
                # filter_tokens_by_lang drops these tokens, whatever the hidden column policy
                uiapi.log.debug(f"No header for unresolved column token '{token}'")
                continue
            if column.hidden and not include_hidden:
                continue
            if title is None:
                title = resolve_label(column.relation_label, lang, default=label_for(column, rest, lang))
            header = column_header(column, title or headline(rest), token, lang)
        else:
            column = schema.get(token)
            if column is None:
                continue
            if column.hidden and not include_hidden:
                continue
            if title is None:
                title = label_for(column, token, lang)
            header = column_header(column, title, column.key, lang)
        headers.append(apply_customization(header, customizations.get(token)))
    return headers


def default_title_field(related_schema: Optional[EntitySchema]) -> str:
    """
    Title field used by relation filters that don't declare an itemTitle
    """
    if related_schema is None:
        return "id"
    for preferred in PREFERRED_TITLE_FIELDS:
        column = related_schema.get(preferred)
        if column is not None and not column.hidden:
            return preferred
    for column in related_schema:
        if not column.hidden and column.type == "string":
            return column.name
    return "id"


def prune_items(items, item_title: str, item_value: str) -> List[dict]:
    """
    Project the declared items onto the title and value keys, scalar items are used for both
    """
    result = []
    for item in items:
        if isinstance(item, Mapping):
            title = item.get(item_title)
            value = item.get(item_value)
            result.append({item_title: "" if title is None else str(title), item_value: "" if value is None else str(value)})
        else:
            result.append({item_title: str(item), item_value: str(item)})
    return result


def build_filters(
    registry,
    model_cls,
    schema: EntitySchema,
    lang: str,
    allowed: Optional[List[str]] = None,
    columns: Optional[List[str]] = None,
) -> List[dict]:
    """
    :param registry: EntityRegistry, relation filters on models it doesn't expose are omitted
    :param allowed: filter allow-list of the view config component, None means no restriction
    :param columns: only build filters for these columns
    :return: list of filter dicts, in schema order
    """
    filters = []
    for column in schema:
        descriptor = column.filterable
        if descriptor is None:
            continue
        if allowed is not None and column.name not in allowed:
            continue
        if columns is not None and column.name not in columns:
            continue

        filter_type = descriptor.type.lower()
        result = {
            "type": filter_type.title(),
            "key": descriptor.value or column.key,
            "label": resolve_label(descriptor.label, lang, default=label_for(column, column.name, lang)),
        }
        if filter_type == "select":
            if descriptor.mode.lower() == "relation":
                if not relation_filter(registry, model_cls, descriptor, lang, result):
                    uiapi.log.warning(f"{model_cls.__name__}.{column.name}: relation filter '{descriptor.relationship}' doesn't resolve to an exposed model")
                    continue
            else:
                item_title = resolve_label(descriptor.item_title, lang, default=column.key, first_entry=True)
                item_value = descriptor.item_value or column.key
                result["itemTitle"] = item_title
                result["itemValue"] = item_value
                result["items"] = prune_items(descriptor.items, item_title, item_value)
        filters.append(result)
    return filters


def relation_filter(registry, model_cls, descriptor, lang: str, result: dict) -> bool:
    """
    Add the lookup url of a relation backed select filter to `result`
    :return: False if the relation doesn't resolve or the related model isn't exposed
    """
    relation = resolve_relation(model_cls, descriptor.relationship or "")
    related_name = registry.name_for(relation.related) if relation is not None else None
    if related_name is None:
        return False
    related_schema = get_schema(relation.related)
    item_value = descriptor.item_value or "id"
    item_title = resolve_label(descriptor.item_title, lang, first_entry=True)
    if item_title is None:
        item_title = default_title_field(related_schema)
    result["itemTitle"] = item_title
    result["itemValue"] = item_value
    result["url"] = api_url(
        f"/{related_name}/options/{item_value}",
        {"itemTitle": item_title, "itemValue": item_value, "lang": lang},
    )
    return True


def pagination_meta(page) -> dict:
    return {
        "current_page": page.page,
        "last_page": page.last_page,
        "per_page": page.per_page,
        "total": page.total,
    }


def build_datalink(model_name: str, component: str, tokens: List[str], lang: str, per_page: int) -> str:
    """
    :return: url of the list endpoint returning the same records
    """
    params = {"component": component, "columns": ",".join(tokens), "lang": lang, "per_page": per_page}
    return api_url(f"/{model_name}", params)


def build_section(node: Node, builders: Dict[str, Callable]) -> dict:
    """
    Recursively build the payload of a layout node
    :param node: parsed layout config node
    :param builders: section name => callable building the section content
    """
    result = {}
    for key, value in node.children:
        if key in SECTIONS and isinstance(value, Toggle):
            result[key] = builders[key]() if value.on else value.raw
        elif isinstance(value, Node):
            result[key] = build_section(value, builders)
        elif isinstance(value, Toggle):
            result[key] = value.raw
        else:
            result[key] = value.value
    return result


def build_component_settings(store: JsonDocumentStore, key: str, builders: Dict[str, Callable]) -> dict:
    """
    The section named after the layout key comes first, followed by the other sections of the document.
    Top level values that aren't sections are ignored.
    """
    layout = load_layout(store, key)
    if layout is None:
        return {}
    settings = {}
    own_section = layout.get(key)
    if isinstance(own_section, Node):
        settings[key] = build_section(own_section, builders)
    for section_key, value in layout.children:
        if section_key == key or not isinstance(value, Node):
            continue
        settings[section_key] = build_section(value, builders)
    return settings
