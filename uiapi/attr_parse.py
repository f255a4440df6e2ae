"""
Parsing and validation of create/update payload values

Columns may declare a `validationRule` in their schema, eg. "required|string|max:255".
Supported rules: required, nullable, string, integer, numeric, boolean, date, max:N, min:N, in:a,b,..
Other rules are ignored.
"""
import datetime
import uiapi
import sqlalchemy
from .errors import FieldValidationError

TRUE_VALUES = ("1", "true", "on", "yes")
FALSE_VALUES = ("0", "false", "off", "no")


def parse_bool(attr_val) -> bool:
    if isinstance(attr_val, bool):
        return attr_val
    if isinstance(attr_val, (int, float)) and attr_val in (0, 1):
        return bool(attr_val)
    value = str(attr_val).strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value {attr_val!r}")


def parse_datetime(attr_val) -> datetime.datetime:
    """
    Parse datetime values for some common representations:
    isoformat and str(datetime.datetime.now())
    """
    if isinstance(attr_val, datetime.datetime):
        return attr_val
    return datetime.datetime.fromisoformat(str(attr_val).strip().replace("Z", "+00:00"))


def parse_attr(column, attr_val):
    """
    Parse the supplied `attr_val` so it can be saved in the SQLAlchemy `column`

    :param column: SQLAlchemy column
    :param attr_val: payload value
    :return: processed value, ValueError or TypeError is raised if it can't be converted
    """
    if attr_val is None:
        return attr_val

    try:
        python_type = column.type.python_type
    except NotImplementedError as exc:
        # custom column types are expected to handle their own parsing
        uiapi.log.debug(exc)
        return attr_val

    # skip type coercion on JSON columns, since they could be anything
    if isinstance(column.type, sqlalchemy.types.JSON):
        return attr_val

    if python_type == datetime.datetime:
        return parse_datetime(attr_val)
    if python_type == datetime.date:
        if isinstance(attr_val, datetime.date):
            return attr_val
        return parse_datetime(attr_val).date()
    if python_type == datetime.time:
        if isinstance(attr_val, datetime.time):
            return attr_val
        return datetime.time.fromisoformat(str(attr_val).strip())
    if python_type == bool:
        return parse_bool(attr_val)
    if python_type == int and isinstance(attr_val, str):
        return int(attr_val.strip())
    return python_type(attr_val)


def coerce_value(column, attr_val):
    """
    Filter values arrive as strings, convert them to the column type when possible
    """
    try:
        return parse_attr(column, attr_val)
    except (TypeError, ValueError):
        uiapi.log.debug(f"Can't convert filter value {attr_val!r} for {column}")
        return attr_val


def parse_rules(rule) -> list:
    """
    "required|string|max:255" => [("required", None), ("string", None), ("max", "255")]
    """
    if not rule:
        return []
    if isinstance(rule, str):
        rule = rule.split("|")
    result = []
    for item in rule:
        name, _, arg = str(item).strip().partition(":")
        if name:
            result.append((name.lower(), arg or None))
    return result


def is_empty(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "") or value == [] or value == {}


def size_of(value, rule_names):
    if isinstance(value, str) and not {"integer", "numeric"} & set(rule_names):
        return len(value)
    if isinstance(value, (list, dict)):
        return len(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return len(str(value))


# pylint: disable=too-many-branches
def check_rules(field, value, rules) -> list:
    """
    :return: list of error messages for `value`
    """
    messages = []
    rule_names = [name for name, _ in rules]
    if is_empty(value):
        if "required" in rule_names:
            messages.append(f"The {field} field is required.")
        return messages

    for name, arg in rules:
        if name == "string" and not isinstance(value, str):
            messages.append(f"The {field} field must be a string.")
        elif name == "integer":
            try:
                if isinstance(value, bool) or float(value) != int(float(value)):
                    raise ValueError
            except (TypeError, ValueError):
                messages.append(f"The {field} field must be an integer.")
        elif name == "numeric":
            try:
                if isinstance(value, bool):
                    raise ValueError
                float(value)
            except (TypeError, ValueError):
                messages.append(f"The {field} field must be a number.")
        elif name == "boolean":
            try:
                parse_bool(value)
            except ValueError:
                messages.append(f"The {field} field must be true or false.")
        elif name == "date":
            try:
                parse_datetime(value)
            except (TypeError, ValueError):
                messages.append(f"The {field} field must be a valid date.")
        elif name in ("max", "min") and arg is not None:
            try:
                limit = float(arg)
            except ValueError:
                uiapi.log.warning(f"Invalid validation rule {name}:{arg} for {field}")
                continue
            size = size_of(value, rule_names)
            if name == "max" and size > limit:
                messages.append(f"The {field} field must not be greater than {arg}.")
            if name == "min" and size < limit:
                messages.append(f"The {field} field must be at least {arg}.")
        elif name == "in" and arg is not None:
            if str(value) not in [option.strip() for option in arg.split(",")]:
                messages.append(f"The selected {field} is invalid.")
    return messages


def validate_payload(cls, schema, payload: dict, partial: bool = False) -> dict:
    """
    Whitelist the payload to the declared columns, validate and convert the values

    :param cls: model class
    :param schema: EntitySchema of `cls`
    :param payload: request payload
    :param partial: update request, absent fields aren't required
    :return: attributes that can be passed to `_s_post` or `_s_patch`
    """
    columns = cls._s_column_attrs
    attributes = {}
    errors = {}
    for column in schema:
        name = column.name
        rules = parse_rules(column.validation_rule)
        if name not in payload:
            if not partial and "required" in [rule for rule, _ in rules]:
                errors[name] = [f"The {name} field is required."]
            continue
        value = payload[name]
        messages = check_rules(name, value, rules)
        if messages:
            errors[name] = messages
            continue
        if name not in columns:
            uiapi.log.debug(f"{cls.__name__}.{name} is not a mapped column, value ignored")
            continue
        if is_empty(value) and isinstance(value, str) and not isinstance(columns[name].type, sqlalchemy.types.String):
            value = None
        try:
            attributes[name] = parse_attr(columns[name], value)
        except (TypeError, ValueError) as exc:
            uiapi.log.debug(f"Invalid value for {cls.__name__}.{name}: {exc}")
            errors[name] = [f"The {name} field has an invalid value."]

    if errors:
        raise FieldValidationError(errors)
    return attributes
