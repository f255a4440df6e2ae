# Exception Handlers
#
# Client errors (422) always send their message back to the client, for example:
# {
#      "error": "component key not found in view config"
# }
#
# Internal errors only show details when the loglevel is set to debug.
#
# The exceptions are caught in http_method_decorator and passed to flask_restful.abort
#
import traceback
from flask import request, has_request_context
from werkzeug.exceptions import NotFound
import uiapi
from sqlalchemy.exc import DontWrapMixin
from http import HTTPStatus
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class UiApiError(Exception, DontWrapMixin):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""

    def to_dict(self) -> dict:
        """
        :return: json body sent to the client
        """
        return {"error": self.message}


class NotFoundError(UiApiError, NotFound):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not found"

    def __init__(self, message=""):
        UiApiError.__init__(self)
        uiapi.log.info("Not found: %s", message)


class GenericError(UiApiError):
    """
    This exception is raised when an error has been detected
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    message = "Generic Error: "

    def __init__(self, message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        Exception.__init__(self)
        self.status_code = status_code
        uiapi.log.error("Generic Error: %s", message)
        if is_debug():
            if has_request_context():
                uiapi.log.info(f"Error in {request.url}")
            uiapi.log.debug(traceback.format_exc(120))
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class ValidationError(UiApiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value

    def __init__(self, message=""):
        Exception.__init__(self, message)
        uiapi.log.warning("ValidationError: %s", message)
        self.message = message


class UnknownEntity(ValidationError):
    """The requested model is not exposed or has no schema"""


class MissingParameter(ValidationError):
    """A required query parameter is absent"""


class ViewConfigError(ValidationError):
    """The view config document or one of its components is missing or incomplete"""


class InvalidToken(ValidationError):
    """A `columns` segment is malformed or references an unknown relation"""


class UnknownColumn(ValidationError):
    """A `columns` token names a field the (related) schema doesn't declare"""


class InvalidFilterSegment(ValidationError):
    """A `filter` pair is not of the form field:value"""


class UnknownFilterField(ValidationError):
    pass


class UnknownSortField(ValidationError):
    pass


class FieldValidationError(ValidationError):
    """
    Raised when a create or update payload violates the declared validation rules
    :param errors: dict mapping field names to a list of messages
    """

    message = "Validation failed."

    def __init__(self, errors):
        Exception.__init__(self, errors)
        uiapi.log.warning("FieldValidationError: %s", errors)
        self.errors = errors

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}
