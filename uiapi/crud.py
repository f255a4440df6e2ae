"""
Create, update and delete

The component and column tokens are resolved before anything is written,
an invalid request never leaves a partial write behind.
The `component` argument is optional here: without it the record contains every declared column.
"""
from http import HTTPStatus
import uiapi
from .attr_parse import validate_payload
from .view_config import resolve_component


def shaping(assembler, model_cls, schema, model_name, params):
    block, columns_param = None, params.columns
    if params.component is not None:
        block, columns_param = resolve_component(assembler.view_store, model_name, params.component, params.columns)
    return assembler.shape_context(model_cls, schema, params, block, columns_param)


def create(assembler, model_name: str, params, payload: dict):
    """
    POST /api/<model>
    :return: (body, 201)
    """
    model_cls, schema = assembler.resolve_entity(model_name)
    context = shaping(assembler, model_cls, schema, model_name, params)
    attributes = validate_payload(model_cls, schema, payload, partial=False)
    instance = model_cls._s_post(**attributes)
    uiapi.log.info(f"Created {instance}")
    return assembler.single_record(instance, context, params.include_meta), HTTPStatus.CREATED


def update(assembler, model_name: str, item_id, params, payload: dict):
    """
    PUT/PATCH /api/<model>/<id>
    :return: (body, 200)
    """
    model_cls, schema = assembler.resolve_entity(model_name)
    context = shaping(assembler, model_cls, schema, model_name, params)
    instance = model_cls.get_instance(item_id)
    attributes = validate_payload(model_cls, schema, payload, partial=True)
    instance = instance._s_patch(**attributes)
    return assembler.single_record(instance, context, params.include_meta), HTTPStatus.OK


def destroy(assembler, model_name: str, item_id):
    """
    DELETE /api/<model>/<id>
    """
    model_cls, _ = assembler.resolve_entity(model_name)
    instance = model_cls.get_instance(item_id)
    instance._s_delete()
    uiapi.log.info(f"Deleted {model_cls.__name__} {item_id}")
