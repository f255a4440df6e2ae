"""
flask_restful resources serving the generic endpoints:

    /<model>                    GET list, POST create
    /<model>/<item_id>          GET show, PUT/PATCH update, DELETE
    /<model>/options/<field>    GET distinct field values

The `registry` class attribute is set when the api creates the resource classes
"""
from http import HTTPStatus
from flask import request, jsonify, make_response
from flask_restful import Resource
from . import crud
from .assembler import ResponseAssembler
from .swagger_doc import COLLECTION, INSTANCE, OPTIONS


class UiApiResource(Resource):
    """
    Base class of the generic resources
    """

    registry = None  # EntityRegistry, set by the api
    kind = None  # swagger path kind

    @property
    def assembler(self) -> ResponseAssembler:
        # the response options and config stores are read per request
        return ResponseAssembler(self.registry)


class CollectionResource(UiApiResource):
    kind = COLLECTION

    def get(self, model):
        """
        List the records of `model`
        """
        return jsonify(self.assembler.index(model, request))

    def post(self, model):
        """
        Create a record
        """
        body, status_code = crud.create(self.assembler, model, request, request.get_payload())
        return make_response(jsonify(body), status_code)


class InstanceResource(UiApiResource):
    kind = INSTANCE

    def get(self, model, item_id):
        return jsonify(self.assembler.show(model, item_id, request))

    def update(self, model, item_id):
        body, status_code = crud.update(self.assembler, model, item_id, request, request.get_payload())
        return make_response(jsonify(body), status_code)

    def put(self, model, item_id):
        return self.update(model, item_id)

    def patch(self, model, item_id):
        return self.update(model, item_id)

    def delete(self, model, item_id):
        crud.destroy(self.assembler, model, item_id)
        return make_response("", HTTPStatus.NO_CONTENT)


class OptionsResource(UiApiResource):
    kind = OPTIONS

    def get(self, model, field):
        return jsonify(self.assembler.options(model, field, request))
