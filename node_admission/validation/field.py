import json
from enum import Enum
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel


class ErrorType(Enum):
    NOT_FOUND = "FieldValueNotFound"
    REQUIRED = "FieldValueRequired"
    DUPLICATE = "FieldValueDuplicate"
    INVALID = "FieldValueInvalid"
    NOT_SUPPORTED = "FieldValueNotSupported"
    FORBIDDEN = "FieldValueForbidden"
    TOO_LONG = "FieldValueTooLong"
    TOO_MANY = "FieldValueTooMany"
    INTERNAL = "InternalError"

    def __str__(self):
        return _ERROR_TYPE_DESCRIPTIONS[self]


_ERROR_TYPE_DESCRIPTIONS = {
    ErrorType.NOT_FOUND: "Not found",
    ErrorType.REQUIRED: "Required value",
    ErrorType.DUPLICATE: "Duplicate value",
    ErrorType.INVALID: "Invalid value",
    ErrorType.NOT_SUPPORTED: "Unsupported value",
    ErrorType.FORBIDDEN: "Forbidden",
    ErrorType.TOO_LONG: "Too long",
    ErrorType.TOO_MANY: "Too many",
    ErrorType.INTERNAL: "Internal error",
}

# Error types whose message never echoes the offending value.
_VALUELESS_TYPES = {
    ErrorType.REQUIRED,
    ErrorType.FORBIDDEN,
    ErrorType.TOO_LONG,
    ErrorType.INTERNAL,
}

IMMUTABLE_DETAIL = "field is immutable"


class Path:
    '''
    Location of a field inside an object, rendered the way the API server
    reports it, e.g. ``overhead.podFixed.requests[cpu]``.
    '''

    def __init__(self, name: str, *more: str):
        self._elements = (name,) + tuple(more)

    @classmethod
    def _from_elements(cls, elements):
        path = cls.__new__(cls)
        path._elements = tuple(elements)
        return path

    def child(self, name: str, *more: str) -> "Path":
        return Path._from_elements(self._elements + (name,) + tuple(more))

    def index(self, i: int) -> "Path":
        return Path._from_elements(self._elements + (f"[{i}]",))

    def key(self, k: str) -> "Path":
        return Path._from_elements(self._elements + (f"[{k}]",))

    def __str__(self):
        rendered = self._elements[0]
        for element in self._elements[1:]:
            if element.startswith("["):
                rendered += element
            else:
                rendered += "." + element
        return rendered

    def __repr__(self):
        return f"Path({str(self)!r})"

    def __eq__(self, other):
        if not isinstance(other, Path):
            return NotImplemented
        return self._elements == other._elements

    def __hash__(self):
        return hash(self._elements)


class FieldError(BaseModel):
    type: ErrorType
    field: str
    bad_value: Any = None
    detail: str = ""

    def error_body(self) -> str:
        if self.type in _VALUELESS_TYPES:
            body = str(self.type)
        else:
            body = f"{self.type}: {_format_value(self.bad_value)}"
        if self.detail:
            body += f": {self.detail}"
        return body

    def is_immutable(self) -> bool:
        return self.type == ErrorType.INVALID and self.detail == IMMUTABLE_DETAIL

    def __str__(self):
        return f"{self.field}: {self.error_body()}"


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return json.dumps(value)
    if value is None:
        return "null"
    return repr(value)


class ErrorList(list):
    '''Ordered collection of FieldErrors; validators append to it and never raise.'''

    def of_type(self, error_type: ErrorType) -> "ErrorList":
        return ErrorList(err for err in self if err.type == error_type)

    def for_field(self, fld_path) -> "ErrorList":
        return ErrorList(err for err in self if err.field == str(fld_path))

    def messages(self) -> List[str]:
        return [str(err) for err in self]

    def __str__(self):
        if len(self) == 1:
            return str(self[0])
        return "[" + ", ".join(self.messages()) + "]"


def required(fld_path: Path, detail: str = "") -> FieldError:
    return FieldError(type=ErrorType.REQUIRED, field=str(fld_path), detail=detail)


def invalid(fld_path: Path, value: Any, detail: str) -> FieldError:
    return FieldError(type=ErrorType.INVALID, field=str(fld_path), bad_value=value, detail=detail)


def immutable(fld_path: Path, value: Any) -> FieldError:
    return invalid(fld_path, value, IMMUTABLE_DETAIL)


def not_supported(fld_path: Path, value: Any, valid_values: Optional[Iterable[str]] = None) -> FieldError:
    detail = ""
    if valid_values:
        detail = "supported values: " + ", ".join(json.dumps(v) for v in valid_values)
    return FieldError(type=ErrorType.NOT_SUPPORTED, field=str(fld_path), bad_value=value, detail=detail)


def forbidden(fld_path: Path, detail: str) -> FieldError:
    return FieldError(type=ErrorType.FORBIDDEN, field=str(fld_path), detail=detail)


def too_long(fld_path: Path, value: Any, max_length: int) -> FieldError:
    return FieldError(
        type=ErrorType.TOO_LONG,
        field=str(fld_path),
        bad_value=value,
        detail=f"must have at most {max_length} characters",
    )
