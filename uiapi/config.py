# Configuration settings should be set in app.config
# get_config falls back to the UiApi class defaults and then to environment variables
import os
import logging
from dataclasses import dataclass
from urllib.parse import urlencode
from flask import current_app, request, has_request_context
import uiapi
from typing import Any, Optional

TRUE_VALUES = ("1", "true", "on", "yes")


def get_config(option: str) -> Any:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        result = getattr(uiapi.UiApi, option, os.environ.get(option, None))
    return result


def get_bool_config(option: str) -> bool:
    """Boolean options may also be set as strings, eg. through the environment"""
    value = get_config(option)
    if isinstance(value, str):
        return value.strip().lower() in TRUE_VALUES
    return bool(value)


def get_int_config(option: str, default: int = 0) -> int:
    value = get_config(option)
    try:
        return int(value)
    except (TypeError, ValueError):
        uiapi.log.warning(f"Invalid integer for config option {option}: {value!r}")
        return default


def get_config_dir(option: str) -> str:
    """
    :param option: VIEW_CONFIG_DIR or COMPONENT_CONFIG_DIR
    :return: absolute directory path, relative paths are resolved against the app root
    """
    directory = str(get_config(option) or "")
    if os.path.isabs(directory):
        return directory
    try:
        root = current_app.root_path
    except RuntimeError:  # pragma: no cover
        root = os.getcwd()
    return os.path.join(root, directory)


def api_url(path: str, params: Optional[dict] = None) -> str:
    """
    Build an absolute url for one of the generic endpoints
    :param path: path relative to the api prefix, eg. /Country/options/id
    :param params: query string arguments, kept in the given order
    """
    root = request.host_url.rstrip("/") if has_request_context() else ""
    url = f"{root}{get_config('API_PREFIX') or ''}{path}"
    if params:
        url += "?" + urlencode(params, safe=",:")
    return url


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    :rtype: Boolean
    """
    return uiapi.log.getEffectiveLevel() < logging.INFO


@dataclass(frozen=True)
class ResponseOptions:
    """
    Response shaping switches, read once per request so a request never sees a partial config change
    """

    include_hidden_columns_in_headers: bool = False
    include_top_level_headers: bool = False
    include_top_level_filters: bool = False
    include_top_level_pagination: bool = False
    nest_relations_in_records: bool = True

    @classmethod
    def from_config(cls) -> "ResponseOptions":
        return cls(
            include_hidden_columns_in_headers=get_bool_config("INCLUDE_HIDDEN_COLUMNS_IN_HEADERS"),
            include_top_level_headers=get_bool_config("INCLUDE_TOP_LEVEL_HEADERS"),
            include_top_level_filters=get_bool_config("INCLUDE_TOP_LEVEL_FILTERS"),
            include_top_level_pagination=get_bool_config("INCLUDE_TOP_LEVEL_PAGINATION"),
            nest_relations_in_records=get_bool_config("NEST_RELATIONS_IN_RECORDS"),
        )
