import re
from decimal import Decimal
from functools import total_ordering
from typing import Any, Dict, Optional

from kubernetes.utils import parse_quantity
from pydantic import BaseModel, ConfigDict, GetCoreSchemaHandler
from pydantic_core import core_schema


RESOURCE_CPU = "cpu"
RESOURCE_MEMORY = "memory"
RESOURCE_EPHEMERAL_STORAGE = "ephemeral-storage"
RESOURCE_HUGEPAGES_PREFIX = "hugepages-"
RESOURCE_DEFAULT_NAMESPACE_PREFIX = "kubernetes.io/"
RESOURCE_REQUESTS_PREFIX = "requests."

# sign, digits, then an exponent, a decimal SI suffix or a binary suffix
_QUANTITY_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+|[numkMGTPE]|[KMGTPE]i)?")


@total_ordering
class Quantity:
    '''
    Fixed point resource amount such as ``500m``, ``4`` or ``10Gi``.

    Instances are immutable: the textual form given at construction is kept as
    the canonical string and the numeric value is used for comparisons.
    '''

    __slots__ = ("_text", "_value")

    def __init__(self, value: Any):
        if isinstance(value, Quantity):
            text = value._text
        else:
            text = str(value).strip()
        if not text:
            raise ValueError("quantity must not be empty")
        if not _QUANTITY_RE.fullmatch(text):
            raise ValueError(f"quantities must match the regular expression '{_QUANTITY_RE.pattern}': {text!r}")
        self._value = parse_quantity(text)
        self._text = text

    @classmethod
    def _validate(cls, value: Any) -> "Quantity":
        if isinstance(value, bool):
            raise ValueError(f"invalid quantity: {value!r}")
        if isinstance(value, Quantity):
            return value
        return cls(value)

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler: GetCoreSchemaHandler):
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )

    @property
    def value(self) -> Decimal:
        return self._value

    def copy(self) -> "Quantity":
        return Quantity(self._text)

    def is_negative(self) -> bool:
        return self._value < 0

    def __eq__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._value == other._value

    def __lt__(self, other):
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._value < other._value

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return self._text

    def __repr__(self):
        return f"Quantity({self._text!r})"


ResourceList = Dict[str, Quantity]


class ResourceRequirements(BaseModel):
    '''
    Requests and limits for a set of resources. ``None`` means the map was not
    given at all, which is distinct from an empty map.
    '''
    model_config = ConfigDict(populate_by_name=True)

    requests: Optional[ResourceList] = None
    limits: Optional[ResourceList] = None


def is_hugepage_resource_name(name: str) -> bool:
    return name.startswith(RESOURCE_HUGEPAGES_PREFIX)


def is_native_resource(name: str) -> bool:
    return "/" not in name or RESOURCE_DEFAULT_NAMESPACE_PREFIX in name
