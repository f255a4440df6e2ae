# uiapi to json encoding

import datetime
import decimal
from enum import Enum
from uuid import UUID
from flask.json.provider import DefaultJSONProvider
import uiapi


class UiApiJSONProvider(DefaultJSONProvider):
    """
    JSON encoding for api records, keys keep their insertion order (column token order)
    """

    sort_keys = False

    # pylint: disable=too-many-return-statements,method-hidden
    def default(self, obj):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if obj is None:
            return None
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        if isinstance(obj, decimal.Decimal):
            return str(obj)
        if isinstance(obj, (UUID, bytes)):
            return str(obj)
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, "to_api_record"):
            return obj.to_api_record()

        uiapi.log.warning(f"Unknown obj type '{type(obj)}' for {obj}")
        return str(obj)
