# flask_restful_swagger2 API subclass
import logging
import werkzeug
from flask_restful import abort
from flask_restful.utils import cors
from flask_restful_swagger_2 import Api as FRSApiBase
from flask_restful_swagger_2 import extract_swagger_path
from functools import wraps
import uiapi
from .config import get_config
from .errors import UiApiError
from .registry import EntityRegistry
from .resources import CollectionResource, InstanceResource, OptionsResource
from .swagger_doc import generic_path_item, parse_object_doc
from flask.app import Flask
from typing import Callable

HTTP_METHODS = ["GET", "POST", "PATCH", "DELETE", "PUT"]


class UiApiAPI(FRSApiBase):
    """
    Subclass of the flask_restful_swagger API class serving the generic endpoints.
    Models are made available with the expose_object method, which registers them by name
    and adds them to the swagger documentation
    """

    def __init__(
        self,
        app: Flask,
        host: str = "localhost",
        port: int = 5000,
        prefix: str = "/api",
        description: str = "Generic UI API",
        swaggerui_blueprint: bool = True,
        **kwargs,
    ) -> None:
        """
        :param app: Flask app
        :param prefix: url prefix of the generic endpoints
        :param kwargs: configuration options, eg. VIEW_CONFIG_DIR, stored in app.config
        """
        app_db = kwargs.pop("app_db", None)
        api_spec_url = kwargs.pop("api_spec_url", "/swagger")
        uiapi.UiApi(app, app_db=app_db, prefix=prefix, swaggerui_blueprint=swaggerui_blueprint, **kwargs)
        # the host shown in the swagger ui
        if port:
            host = f"{host}:{port}"

        self.registry = EntityRegistry()
        super().__init__(
            app,
            api_spec_url=api_spec_url,
            host=host,
            description=description,
            prefix=prefix,
            base_path=prefix,
        )
        self.expose_generic_resources()

    def expose_generic_resources(self) -> None:
        """
        Create the resource classes bound to our registry and add them to the api
        """
        properties = {"registry": self.registry}
        for resource_cls, url, endpoint in (
            (CollectionResource, "/<string:model>", "uiapi.collection"),
            (InstanceResource, "/<string:model>/<string:item_id>", "uiapi.instance"),
            (OptionsResource, "/<string:model>/options/<string:field>", "uiapi.options"),
        ):
            api_class = api_decorator(type(f"{resource_cls.__name__}_API", (resource_cls,), dict(properties)))
            uiapi.log.info(f"Exposing {resource_cls.kind} resource on {url}, endpoint: {endpoint}")
            self.add_resource(api_class, url, endpoint=endpoint)

    def expose_object(self, model_cls, name: str = None) -> str:
        """This method registers a model so it can be requested by name, eg. /api/person
        :param model_cls: UiApiBase subclass that we would like to expose
        :param name: url name, defaults to the class name (lookups are case insensitive)
        :return: registered name
        """
        registered = self.registry.register(model_cls, name)
        uiapi.log.info(f"Exposing {model_cls.__name__} as '{registered}'")

        try:
            object_doc = parse_object_doc(model_cls)
        except Exception as exc:
            uiapi.log.error(f"Failed to parse docstring {exc}")
            object_doc = {}
        object_doc["name"] = registered
        self._swagger_object["tags"] = [tag for tag in self._swagger_object["tags"] if tag.get("name") != registered]
        self._swagger_object["tags"].append(object_doc)
        self.update_model_enum()
        return registered

    def expose(self, *model_classes) -> None:
        """
        Expose multiple models at once
        """
        for model_cls in model_classes:
            self.expose_object(model_cls)

    def update_model_enum(self) -> None:
        """
        The `model` path parameter lists the exposed models
        """
        for path_item in self._swagger_object["paths"].values():
            for method_doc in path_item.values():
                for param in method_doc.get("parameters", []):
                    if param.get("name") == "model" and param.get("in") == "path":
                        param["enum"] = self.registry.names

    def add_resource(self, resource, *urls, **kwargs):
        """
        Add the swagger path items of our generic resources,
        the swagger endpoint itself is added without documentation
        """
        kind = getattr(resource, "kind", None)
        for url in urls:
            if kind is None:
                continue
            swagger_url = extract_swagger_path(url)
            self._swagger_object["paths"][swagger_url] = generic_path_item(kind, self.registry.names)
        # pylint: disable=bad-super-call
        super(FRSApiBase, self).add_resource(resource, *urls, **kwargs)


def api_decorator(cls):
    """Decorator for the API views:
        - add cors
        - add generic exception handling

    :param cls: The class that will be decorated (e.g. CollectionResource)
    :return: decorated class
    """
    cors_domain = get_config("cors_domain")
    for method_name in [m.lower() for m in HTTP_METHODS]:
        method = getattr(cls, method_name, None)
        if not method:
            continue

        decorated_method = method
        # Add cors
        if cors_domain is not None:
            decorated_method = cors.crossdomain(origin=cors_domain)(decorated_method)
        # Add exception handling
        decorated_method = http_method_decorator(decorated_method)
        setattr(cls, method_name, decorated_method)
    return cls


def http_method_decorator(fun: Callable) -> Callable:
    """Decorator for the supported HTTP methods (get, post, put, patch, delete)
    - commit the database
    - convert all exceptions to a json error body

    :param fun:
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        try:
            result = fun(*args, **kwargs)
            uiapi.DB.session.commit()
            return result

        except UiApiError as exc:
            # this also catches uiapi.errors.NotFoundError
            status_code = exc.status_code
            body = exc.to_dict()

        except werkzeug.exceptions.HTTPException as exc:
            status_code = exc.code
            body = {"error": exc.description}
            uiapi.log.error(exc.description)

        except Exception as exc:
            uiapi.log.exception(exc)
            status_code = 500
            if uiapi.log.getEffectiveLevel() > logging.DEBUG:
                body = {"error": "Logging Disabled"}
            else:
                body = {"error": str(exc)}

        uiapi.DB.session.rollback()
        abort(status_code, **body)

    return method_wrapper
