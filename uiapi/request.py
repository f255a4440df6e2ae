"""
Query argument parsing for the generic endpoints

    component   view config component key (required for list and show)
    columns     comma separated column tokens, "alias.field" selects a related field
    filter      comma separated field:value pairs, "*" is a wildcard
    sort        comma separated fields, a leading "-" sorts descending
    with        comma separated relation paths to eager load
    q           search term applied to the searchable columns
    lang        requested language
    page, per_page
    include_meta, componentSettings
"""
from flask import Request
import uiapi
from .errors import ValidationError
from .util import split_csv

TRUE_VALUES = ("1", "true", "on", "yes")


def parse_bool(value, default=True) -> bool:
    """
    Boolean query arguments: 1/true/on/yes are true, anything else given is false
    """
    if value is None:
        return default
    return str(value).strip().lower() in TRUE_VALUES


def parse_int(value, name):
    """
    :return: the integer value of a query argument, None if it's absent
    """
    if value is None or str(value).strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Pagination Value Error: invalid {name} '{value}'")


# pylint: disable=too-many-ancestors
class UiApiRequest(Request):
    """
    Parse the query arguments used by the generic endpoints
    """

    @property
    def component(self):
        component = self.args.get("component")
        if component is None or not component.strip():
            return None
        return component.strip()

    @property
    def columns(self):
        return self.args.get("columns")

    @property
    def filter(self):
        return self.args.get("filter")

    @property
    def sort(self):
        return self.args.get("sort")

    @property
    def with_relations(self):
        return split_csv(self.args.get("with"))

    @property
    def search(self):
        q = self.args.get("q")
        if q is None or not q.strip():
            return None
        return q.strip()

    @property
    def lang(self):
        lang = self.args.get("lang")
        if lang is None or not lang.strip():
            return None
        return lang.strip()

    @property
    def page(self):
        return parse_int(self.args.get("page"), "page")

    @property
    def per_page(self):
        return parse_int(self.args.get("per_page"), "per_page")

    @property
    def limit(self):
        return parse_int(self.args.get("limit"), "limit")

    @property
    def include_meta(self):
        return parse_bool(self.args.get("include_meta"), default=True)

    @property
    def component_settings(self):
        return self.args.get("componentSettings") or self.args.get("component_settings")

    def get_payload(self) -> dict:
        """
        :return: the create/update payload, json or form encoded
        """
        if self.is_json:
            result = self.get_json(silent=True)
            if not isinstance(result, dict):
                uiapi.log.warning(f"Invalid JSON Payload : {result}")
                raise ValidationError("Invalid JSON Payload")
            return result
        return self.form.to_dict()
