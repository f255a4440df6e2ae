import logging
import os
import sys
from flask_swagger_ui import get_swaggerui_blueprint
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from .request import UiApiRequest
from .json_encoder import UiApiJSONProvider
import uiapi
import flask.app


class UiApi:
    """This class configures the Flask application to serve UiApiBase models
    :param app: a Flask application.
    :param prefix: URL prefix of the generic endpoints. Default is '/api'
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)

    Options passed as keyword arguments are stored in `app.config` unless the app already defines them.
    """

    # Default configuration settings, overridden by app.config or environment variables
    DEFAULT_PER_PAGE = 25
    MAX_PAGE_LIMIT = 1000
    DEFAULT_LANG = "dv"
    DEFAULT_COMPONENT_SETTINGS = "table"
    DEFAULT_OPTIONS_LIMIT = 50
    VIEW_CONFIG_DIR = "viewConfigs"
    COMPONENT_CONFIG_DIR = "componentConfigs"
    INCLUDE_HIDDEN_COLUMNS_IN_HEADERS = False
    INCLUDE_TOP_LEVEL_HEADERS = False
    INCLUDE_TOP_LEVEL_FILTERS = False
    INCLUDE_TOP_LEVEL_PAGINATION = False
    NEST_RELATIONS_IN_RECORDS = True
    API_PREFIX = "/api"
    LOGLEVEL = logging.WARNING

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(
        self,
        app: flask.app.Flask,
        prefix: str = "/api",
        app_db: SQLAlchemy = None,
        swaggerui_blueprint: bool = True,
        **kwargs,
    ) -> None:
        """
        API and application initialization
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]

        uiapi.DB = self.db = app_db

        app.request_class = UiApiRequest
        app.json = UiApiJSONProvider(app)
        app.url_map.strict_slashes = False
        app.config.setdefault("API_PREFIX", prefix)
        # keep the 404 body as {"error": "Not found"}, flask_restful would add url suggestions
        app.config.setdefault("ERROR_404_HELP", False)

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        if swaggerui_blueprint is True:
            swaggerui_blueprint = get_swaggerui_blueprint(
                f"{prefix}/docs", f"{prefix}/swagger.json", config={"docExpansion": "none", "defaultModelsExpandDepth": -1}
            )
            app.register_blueprint(swaggerui_blueprint, url_prefix=f"{prefix}/docs")

        for conf_name, conf_val in kwargs.items():
            app.config.setdefault(conf_name, conf_val)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. http://flask.pocoo.org/docs/0.12/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        """
        log = logging.getLogger(__name__)
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = UiApi.init_logging(LOGLEVEL)
