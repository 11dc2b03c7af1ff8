"""Values stored in a model store.

A property value is either a primitive (str, bool, int or float) or a
:class:`TypedValue` pointing to another object. List properties hold
sequences of such values.
"""

from __future__ import annotations

import re

from dataclasses import dataclass, field
from enum import Enum

from typing import TYPE_CHECKING

from spdx_store.error import InvalidInputError

if TYPE_CHECKING:
    from typing import Any, Dict, List, Union

    Value = Union[str, bool, int, float, "TypedValue"]

TYPE_R = re.compile(r"^[A-Za-z_][A-Za-z0-9_.:-]*$")
WHITESPACE_R = re.compile(r"\s")


class IdType(Enum):
    """Kinds of object identifiers.

    The value of each member is the prefix of the identifiers generated
    for it by ModelStore.get_next_id.
    """

    LICENSE_REF = "LicenseRef-gnrtd"
    DOCUMENT_REF = "DocumentRef-gnrtd"
    SPDX_ID = "SPDXRef-gnrtd"
    LISTED_LICENSE = "ListedLicense-gnrtd"
    LITERAL = "Literal-gnrtd"
    ANONYMOUS = "__anonymous__"

    @property
    def prefix(self) -> str:
        return self.value

    def format_id(self, index: int) -> str:
        """Return the generated identifier number index for this kind."""
        return f"{self.prefix}{index}"


@dataclass(frozen=True)
class TypedValue:
    """Reference to an object, possibly in another document.

    The store does not check that the designated object exists.
    """

    document_uri: str
    id: str
    type: str

    def __post_init__(self) -> None:
        check_document_uri(self.document_uri)
        check_id(self.id)
        check_type(self.type)

    def __str__(self) -> str:
        return f"{self.document_uri}#{self.id}"


@dataclass
class ObjectSnapshot:
    """Copy of the state of one object at a given instant.

    :ivar type: the object type
    :ivar values: scalar properties, by name
    :ivar value_lists: list properties, by name
    """

    type: str
    values: Dict[str, Value] = field(default_factory=dict)
    value_lists: Dict[str, List[Value]] = field(default_factory=dict)

    def references(self) -> List[TypedValue]:
        """Return all reference values held by the object, in property order."""
        result = [v for v in self.values.values() if isinstance(v, TypedValue)]
        for elements in self.value_lists.values():
            result.extend(v for v in elements if isinstance(v, TypedValue))
        return result


def _check_name(kind: str, value: Any) -> None:
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{kind} must be a non empty string, got {value!r}")


def check_document_uri(document_uri: Any) -> None:
    """Raise InvalidInputError if document_uri is not a valid document URI."""
    _check_name("document URI", document_uri)


def check_id(id: Any) -> None:
    """Raise InvalidInputError if id is not a valid object identifier."""
    _check_name("id", id)
    if WHITESPACE_R.search(id):
        raise InvalidInputError(f"id {id!r} contains whitespaces")


def check_type(type: Any) -> None:
    """Raise InvalidInputError if type is not a valid object type name."""
    _check_name("type", type)
    if not TYPE_R.match(type):
        raise InvalidInputError(f"invalid type name {type!r}")


def check_property_name(property_name: Any) -> None:
    """Raise InvalidInputError if property_name is not a valid property name."""
    _check_name("property name", property_name)


def check_value(value: Any) -> None:
    """Raise InvalidInputError if value cannot be stored in a property.

    Accepted values are strings, booleans, integers, floats and TypedValue.
    """
    if isinstance(value, (str, bool, int, float, TypedValue)):
        return
    raise InvalidInputError(
        f"unsupported value kind {type(value).__name__} ({value!r})"
    )
