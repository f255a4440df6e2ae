"""
Swagger 2 documentation of the generic endpoints
"""
import inspect
from http import HTTPStatus
import yaml
import uiapi
from .errors import GenericError
from typing import Any, Dict, List

DOC_DELIMITER = "---"  # the yaml swagger document precedes the delimiter in model docstrings

COLLECTION = "collection"
INSTANCE = "instance"
OPTIONS = "options"

ERROR_RESPONSES = {
    str(HTTPStatus.UNPROCESSABLE_ENTITY.value): {"description": "Invalid request, the body contains the error message"},
    str(HTTPStatus.INTERNAL_SERVER_ERROR.value): {"description": "Internal Server Error"},
}


def parse_object_doc(obj: Any) -> Dict[str, Any]:
    """
    Parse the yaml description from the model docstring
    """
    api_doc = {}
    obj_doc = str(inspect.getdoc(obj))
    raw_doc = obj_doc.split(DOC_DELIMITER)[0]

    try:
        yaml_doc = yaml.safe_load(raw_doc)
    except yaml.YAMLError as exc:
        uiapi.log.error(f"Failed to parse documentation {raw_doc} ({exc})")
        yaml_doc = {"description": raw_doc}

    if isinstance(yaml_doc, dict):
        api_doc.update(yaml_doc)
    elif isinstance(yaml_doc, str):
        api_doc["description"] = yaml_doc

    return api_doc


def query_param(name: str, description: str, param_type: str = "string", **kwargs) -> dict:
    param = {"name": name, "in": "query", "type": param_type, "required": False, "description": description}
    param.update(kwargs)
    return param


def path_param(name: str, description: str, **kwargs) -> dict:
    param = {"name": name, "in": "path", "type": "string", "required": True, "description": description}
    param.update(kwargs)
    return param


def shaping_parameters(component_required: bool = True) -> List[dict]:
    return [
        query_param("component", "View config component key", required=component_required),
        query_param("columns", "Comma separated column tokens, eg. id,name,country.name_eng"),
        query_param("with", "Comma separated relations to eager load"),
        query_param("lang", "Requested language"),
        query_param("include_meta", "Include the column declarations", "boolean", default=True),
    ]


def list_parameters() -> List[dict]:
    return shaping_parameters() + [
        query_param("filter", "Comma separated field:value pairs, '*' is a wildcard"),
        query_param("sort", "Comma separated fields, prefix with '-' to sort descending"),
        query_param("q", "Search term"),
        query_param("page", "Page number", "integer", default=1),
        query_param("per_page", "Page size", "integer"),
        query_param("componentSettings", "Component (layout) config key"),
    ]


def operation(summary: str, tags: List[str], parameters: List[dict], responses: Dict[str, dict], body: bool = False) -> dict:
    parameters = list(parameters)
    if body:
        parameters.append({"name": "payload", "in": "body", "required": True, "schema": {"type": "object"}})
    result_responses = dict(responses)
    result_responses.update(ERROR_RESPONSES)
    operation_id = summary.lower().replace(" ", "_")
    return {"summary": summary, "operationId": operation_id, "tags": tags, "parameters": parameters, "responses": result_responses}


def generic_path_item(kind: str, model_names: List[str]) -> Dict[str, dict]:
    """
    :param kind: collection, instance or options
    :param model_names: names of the exposed models, used as the model enum
    :return: swagger path item
    """
    model = path_param("model", "Model name", enum=model_names)
    ok = {str(HTTPStatus.OK.value): {"description": "Request fulfilled"}}
    tags = ["generic"]

    if kind == COLLECTION:
        return {
            "get": operation("List records", tags, [model] + list_parameters(), ok),
            "post": operation(
                "Create record",
                tags,
                [model] + shaping_parameters(False),
                {str(HTTPStatus.CREATED.value): {"description": "Created"}},
                body=True,
            ),
        }
    if kind == INSTANCE:
        item_id = path_param("item_id", "Primary key")
        not_found = {str(HTTPStatus.NOT_FOUND.value): {"description": "Not found"}}
        return {
            "get": operation("Show record", tags, [model, item_id] + shaping_parameters(), {**ok, **not_found}),
            "put": operation("Update record", tags, [model, item_id] + shaping_parameters(False), {**ok, **not_found}, body=True),
            "delete": operation(
                "Delete record",
                tags,
                [model, item_id],
                {str(HTTPStatus.NO_CONTENT.value): {"description": "Deleted"}, **not_found},
            ),
        }
    if kind == OPTIONS:
        parameters = [
            model,
            path_param("field", "Column name"),
            query_param("itemTitle", "Title field"),
            query_param("itemValue", "Value field"),
            query_param("limit", "Max number of items", "integer"),
            query_param("sort", "asc or desc", enum=["asc", "desc"]),
        ]
        return {"get": operation("Field options", tags, parameters, ok)}
    raise GenericError(f"Unknown path kind {kind}")
