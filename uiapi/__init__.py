# flake8: noqa: F401
#
# uiapi: schema driven generic CRUD endpoints for Flask-SQLAlchemy models
#
from .uiapi_init import DB, log, UiApi, UiApiRequest
from .errors import (
    UiApiError,
    ValidationError,
    FieldValidationError,
    GenericError,
    NotFoundError,
    UnknownEntity,
    MissingParameter,
    ViewConfigError,
    InvalidToken,
    UnknownColumn,
    InvalidFilterSegment,
    UnknownFilterField,
    UnknownSortField,
)
from .json_encoder import UiApiJSONProvider
from .base import UiApiBase
from .schema import EntitySchema, ColumnDescriptor, FilterDescriptor
from .config import ResponseOptions
from .api import UiApiAPI
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "UiApi",
    "UiApiAPI",
    # db:
    "UiApiBase",
    "EntitySchema",
    "ColumnDescriptor",
    "FilterDescriptor",
    # config:
    "ResponseOptions",
    "UiApiJSONProvider",
    # Errors:
    "UiApiError",
    "ValidationError",
    "FieldValidationError",
    "GenericError",
    "NotFoundError",
    "UnknownEntity",
    "MissingParameter",
    "ViewConfigError",
    "InvalidToken",
    "UnknownColumn",
    "InvalidFilterSegment",
    "UnknownFilterField",
    "UnknownSortField",
    # request
    "UiApiRequest",
)
