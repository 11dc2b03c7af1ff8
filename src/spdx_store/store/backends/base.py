"""Model store contract.

A model store holds the objects of a set of SPDX documents. Objects are
identified by a document URI and an id unique within the document, have
a fixed type and carry properties. A property is either a scalar slot,
holding one value, or a list slot, holding an ordered sequence of values.
See spdx_store.model for the accepted values.

Implementations must be safe for concurrent use: the store, not the
caller, is responsible for locking.
"""

from __future__ import annotations

import abc
from collections import deque
from typing import TYPE_CHECKING

import spdx_store.log
from spdx_store.error import NotFoundError, TypeConflictError
from spdx_store.log import progress_bar
from spdx_store.model import TypedValue, check_type

if TYPE_CHECKING:
    from typing import Any, Deque, List, Optional, Set, Tuple
    from spdx_store.model import IdType, ObjectSnapshot, Value

logger = spdx_store.log.getLogger("store")


class ModelStore(metaclass=abc.ABCMeta):
    def __init__(self, store_configuration: Any = None):
        """Initialize a ModelStore object.

        :param store_configuration: backend specific configuration
        """
        self.store_configuration = store_configuration

    @abc.abstractmethod
    def exists(self, document_uri: str, id: str) -> bool:
        """Return True if the id already exists for the document.

        This never raises.
        """
        pass  # all: no cover

    @abc.abstractmethod
    def create(self, document_uri: str, id: str, type: str) -> None:
        """Create a new object without properties.

        :param document_uri: the SPDX document URI
        :param id: unique id within the SPDX document
        :param type: type of the object, cannot be changed afterward
        :raise AlreadyExistsError: if the object already exists
        :raise InvalidInputError: if type or id are malformed
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_property_value_names(self, document_uri: str, id: str) -> List[str]:
        """Return the names of the scalar properties of an object.

        :raise NotFoundError: if the object does not exist
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_property_value_list_names(self, document_uri: str, id: str) -> List[str]:
        """Return the names of the list properties of an object.

        :raise NotFoundError: if the object does not exist
        """
        pass  # all: no cover

    @abc.abstractmethod
    def set_value(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> None:
        """Set a scalar property, creating it if needed.

        :raise TypeConflictError: if the property is a list
        """
        pass  # all: no cover

    @abc.abstractmethod
    def clear_property_value_list(
        self, document_uri: str, id: str, property_name: str
    ) -> None:
        """Set a property to an empty list.

        Any scalar value previously held under that name is dropped.
        """
        pass  # all: no cover

    @abc.abstractmethod
    def add_value_to_list(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> None:
        """Append a value to a list property, creating the list if needed.

        :raise TypeConflictError: if the property is a scalar
        """
        pass  # all: no cover

    @abc.abstractmethod
    def remove_value_from_list(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> bool:
        """Remove the first element equal to value from a list property.

        :return: False if value is not in the list
        :raise TypeConflictError: if the property is a scalar
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_value_list(
        self, document_uri: str, id: str, property_name: str
    ) -> List[Value]:
        """Return a copy of a list property, empty if never set.

        :raise TypeConflictError: if the property is a scalar
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_value(
        self, document_uri: str, id: str, property_name: str
    ) -> Optional[Value]:
        """Return a scalar property value or None if not set.

        :raise TypeConflictError: if the property is a list
        """
        pass  # all: no cover

    @abc.abstractmethod
    def remove_property(self, document_uri: str, id: str, property_name: str) -> None:
        """Remove a scalar or list property.

        Nothing is done if the property does not exist.
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_next_id(self, id_type: IdType, document_uri: str) -> str:
        """Generate and reserve an id unused within the document.

        :param id_type: kind of id, selects the id prefix
        :param document_uri: the SPDX document URI
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_typed_value(self, document_uri: str, id: str) -> Optional[TypedValue]:
        """Return a reference to an existing object or None."""
        pass  # all: no cover

    @abc.abstractmethod
    def get_all_items(
        self, document_uri: str, type: Optional[str] = None
    ) -> List[TypedValue]:
        """Return references to all objects of a document, in creation order.

        :param type: if not None only return objects of that type
        """
        pass  # all: no cover

    @abc.abstractmethod
    def get_document_uris(self) -> List[str]:
        """Return the URIs of the documents holding at least one object."""
        pass  # all: no cover

    @abc.abstractmethod
    def read_object(self, document_uri: str, id: str) -> ObjectSnapshot:
        """Return a consistent snapshot of one object.

        :raise NotFoundError: if the object does not exist
        """
        pass  # all: no cover

    @abc.abstractmethod
    def write_objects(self, items: List[Tuple[str, str, ObjectSnapshot]]) -> None:
        """Materialize snapshots, all or nothing.

        Objects are created if needed. Properties of a snapshot replace the
        properties with the same name, other properties are kept. Nothing is
        written if any of the objects cannot be written.

        :param items: list of (document URI, id, snapshot), an object can
            appear only once
        :raise TypeConflictError: if an object exists with another type or
            if a property would change from scalar to list or the reverse
        """
        pass  # all: no cover

    def write_object(
        self, document_uri: str, id: str, snapshot: ObjectSnapshot
    ) -> None:
        """Materialize one snapshot, see write_objects."""
        self.write_objects([(document_uri, id, snapshot)])

    def is_list_property(self, document_uri: str, id: str, property_name: str) -> bool:
        return property_name in self.get_property_value_list_names(document_uri, id)

    def list_size(self, document_uri: str, id: str, property_name: str) -> int:
        return len(self.get_value_list(document_uri, id, property_name))

    def list_contains(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> bool:
        return value in self.get_value_list(document_uri, id, property_name)

    def copy_from(
        self, document_uri: str, id: str, type: str, source_store: ModelStore
    ) -> None:
        """Copy an object from another store.

        Reference values are copied as is: the objects they designate are
        not copied (see copy_graph_from).

        :param document_uri: the SPDX document URI
        :param id: id of the object to copy
        :param type: expected type of the object
        :param source_store: store to read the object from
        :raise NotFoundError: if the object is not in source_store
        :raise TypeConflictError: if the source or the destination object
            has not the expected type
        """
        check_type(type)
        snapshot = source_store.read_object(document_uri, id)
        if snapshot.type != type:
            raise TypeConflictError(
                f"{document_uri}#{id} has type {snapshot.type}, expecting {type}",
                origin="copy_from",
            )
        self.write_object(document_uri, id, snapshot)
        logger.debug("copied %s (%s)", id, type, document_uri=document_uri)

    def copy_graph_from(
        self, document_uri: str, id: str, type: str, source_store: ModelStore
    ) -> List[TypedValue]:
        """Copy an object and all the objects it transitively references.

        Each object is copied once, keeping its document URI and id.
        Referenced objects missing from source_store are skipped. All the
        objects are read before writing any of them: if one of them cannot
        be written the destination store is left unchanged.

        :return: references to the copied objects, in copy order
        :raise NotFoundError: if the initial object is not in source_store
        :raise TypeConflictError: if an object exists in the destination with
            another type or with properties of another kind
        """
        root = TypedValue(document_uri, id, type)
        pending: Deque[TypedValue] = deque([root])
        visited: Set[Tuple[str, str]] = set()
        snapshots: List[Tuple[str, str, ObjectSnapshot]] = []

        while pending:
            ref = pending.popleft()
            if (ref.document_uri, ref.id) in visited:
                continue
            visited.add((ref.document_uri, ref.id))

            if ref is root:
                snapshot = source_store.read_object(ref.document_uri, ref.id)
                if snapshot.type != type:
                    raise TypeConflictError(
                        f"{ref} has type {snapshot.type}, expecting {type}",
                        origin="copy_graph_from",
                    )
            else:
                try:
                    snapshot = source_store.read_object(ref.document_uri, ref.id)
                except NotFoundError:
                    logger.warning(
                        "dangling reference to %s", ref, document_uri=document_uri
                    )
                    continue

            snapshots.append((ref.document_uri, ref.id, snapshot))
            pending.extend(snapshot.references())

        self.write_objects(snapshots)
        result = [
            TypedValue(ref_uri, ref_id, snapshot.type)
            for ref_uri, ref_id, snapshot in snapshots
        ]
        logger.debug(
            "copied %d objects reachable from %s",
            len(result),
            id,
            document_uri=document_uri,
        )
        return result

    def copy_document(self, document_uri: str, source_store: ModelStore) -> int:
        """Copy all the objects of a document from another store.

        :return: the number of copied objects
        """
        items = source_store.get_all_items(document_uri)
        for item in progress_bar(items, desc=document_uri, unit="object"):
            self.copy_from(item.document_uri, item.id, item.type, source_store)
        return len(items)
