"""In-memory model store.

Each document has its own reentrant lock, taken by every operation
reading or modifying an object of the document. The table of documents is
protected by a store-level lock that is never held while waiting for a
document lock.
"""

from __future__ import annotations

import threading
from contextlib import ExitStack, contextmanager
from typing import TYPE_CHECKING

import spdx_store.log
from spdx_store.error import (
    AlreadyExistsError,
    InvalidInputError,
    NotFoundError,
    TypeConflictError,
)
from spdx_store.model import (
    IdType,
    ObjectSnapshot,
    TypedValue,
    check_document_uri,
    check_id,
    check_property_name,
    check_type,
    check_value,
)
from spdx_store.store.backends.base import ModelStore

if TYPE_CHECKING:
    from typing import Any, Dict, Iterator, List, Optional, Set, Tuple
    from spdx_store.model import Value

logger = spdx_store.log.getLogger("store.memory")


class StoredObject:
    """State of one object."""

    __slots__ = ("type", "values", "value_lists")

    def __init__(self, type: str) -> None:
        self.type = type
        self.values: Dict[str, Value] = {}
        self.value_lists: Dict[str, List[Value]] = {}


class StoredDocument:
    """Objects and id generation state of one document.

    :ivar lock: lock protecting all the attributes below and the content of
        the stored objects
    :ivar objects: objects by id, in creation order
    :ivar next_index: next generation index per id kind
    :ivar reserved_ids: ids returned by get_next_id
    """

    def __init__(self, uri: str) -> None:
        self.uri = uri
        self.lock = threading.RLock()
        self.objects: Dict[str, StoredObject] = {}
        self.next_index: Dict[IdType, int] = {}
        self.reserved_ids: Set[str] = set()

    def is_used(self, id: str) -> bool:
        return id in self.objects or id in self.reserved_ids


class InMemoryStore(ModelStore):
    """Thread-safe model store keeping everything in memory."""

    def __init__(self, store_configuration: Any = None):
        super().__init__(store_configuration)
        self.lock = threading.Lock()
        self.documents: Dict[str, StoredDocument] = {}

    def get_document(
        self, document_uri: str, create: bool = False
    ) -> Optional[StoredDocument]:
        """Return the document state.

        :param document_uri: the SPDX document URI
        :param create: if True create the document state when missing
        :return: the document or None if it does not exist and create is False
        """
        with self.lock:
            document = self.documents.get(document_uri)
            if document is None and create:
                document = StoredDocument(document_uri)
                self.documents[document_uri] = document
            return document

    @contextmanager
    def locked_object(
        self, document_uri: str, id: str, origin: str
    ) -> Iterator[StoredObject]:
        """Hold the document lock and yield an existing object.

        :raise NotFoundError: if the object does not exist
        """
        check_document_uri(document_uri)
        check_id(id)
        document = self.get_document(document_uri)
        if document is None:
            raise NotFoundError(f"unknown document {document_uri}", origin=origin)
        with document.lock:
            obj = document.objects.get(id)
            if obj is None:
                raise NotFoundError(
                    f"{id} does not exist in {document_uri}", origin=origin
                )
            yield obj

    def exists(self, document_uri: str, id: str) -> bool:
        if not isinstance(document_uri, str) or not isinstance(id, str):
            return False
        document = self.get_document(document_uri)
        if document is None:
            return False
        with document.lock:
            return id in document.objects

    def create(self, document_uri: str, id: str, type: str) -> None:
        check_document_uri(document_uri)
        check_id(id)
        check_type(type)
        document = self.get_document(document_uri, create=True)
        assert document is not None
        with document.lock:
            if id in document.objects:
                raise AlreadyExistsError(
                    f"{id} already exists in {document_uri}", origin="create"
                )
            document.objects[id] = StoredObject(type)
        logger.debug("created %s (%s)", id, type, document_uri=document_uri)

    def get_property_value_names(self, document_uri: str, id: str) -> List[str]:
        with self.locked_object(document_uri, id, "get_property_value_names") as obj:
            return list(obj.values)

    def get_property_value_list_names(self, document_uri: str, id: str) -> List[str]:
        with self.locked_object(
            document_uri, id, "get_property_value_list_names"
        ) as obj:
            return list(obj.value_lists)

    def set_value(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> None:
        check_property_name(property_name)
        check_value(value)
        with self.locked_object(document_uri, id, "set_value") as obj:
            if property_name in obj.value_lists:
                raise TypeConflictError(
                    f"{property_name} of {id} is a list", origin="set_value"
                )
            obj.values[property_name] = value

    def clear_property_value_list(
        self, document_uri: str, id: str, property_name: str
    ) -> None:
        check_property_name(property_name)
        with self.locked_object(document_uri, id, "clear_property_value_list") as obj:
            obj.values.pop(property_name, None)
            obj.value_lists[property_name] = []

    def add_value_to_list(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> None:
        check_property_name(property_name)
        check_value(value)
        with self.locked_object(document_uri, id, "add_value_to_list") as obj:
            if property_name in obj.values:
                raise TypeConflictError(
                    f"{property_name} of {id} is not a list",
                    origin="add_value_to_list",
                )
            obj.value_lists.setdefault(property_name, []).append(value)

    def remove_value_from_list(
        self, document_uri: str, id: str, property_name: str, value: Value
    ) -> bool:
        check_property_name(property_name)
        with self.locked_object(document_uri, id, "remove_value_from_list") as obj:
            if property_name in obj.values:
                raise TypeConflictError(
                    f"{property_name} of {id} is not a list",
                    origin="remove_value_from_list",
                )
            elements = obj.value_lists.get(property_name)
            if elements is None or value not in elements:
                return False
            elements.remove(value)
            return True

    def get_value_list(
        self, document_uri: str, id: str, property_name: str
    ) -> List[Value]:
        check_property_name(property_name)
        with self.locked_object(document_uri, id, "get_value_list") as obj:
            if property_name in obj.values:
                raise TypeConflictError(
                    f"{property_name} of {id} is not a list", origin="get_value_list"
                )
            return list(obj.value_lists.get(property_name, ()))

    def get_value(
        self, document_uri: str, id: str, property_name: str
    ) -> Optional[Value]:
        check_property_name(property_name)
        with self.locked_object(document_uri, id, "get_value") as obj:
            if property_name in obj.value_lists:
                raise TypeConflictError(
                    f"{property_name} of {id} is a list", origin="get_value"
                )
            return obj.values.get(property_name)

    def remove_property(self, document_uri: str, id: str, property_name: str) -> None:
        check_property_name(property_name)
        with self.locked_object(document_uri, id, "remove_property") as obj:
            obj.values.pop(property_name, None)
            obj.value_lists.pop(property_name, None)

    def get_next_id(self, id_type: IdType, document_uri: str) -> str:
        if not isinstance(id_type, IdType):
            raise InvalidInputError(
                f"unknown id type {id_type!r}", origin="get_next_id"
            )
        check_document_uri(document_uri)
        document = self.get_document(document_uri, create=True)
        assert document is not None
        with document.lock:
            index = document.next_index.get(id_type, 0)
            result = id_type.format_id(index)
            while document.is_used(result):
                spdx_store.log.debug("skipping used id %s", result)
                index += 1
                result = id_type.format_id(index)
            document.next_index[id_type] = index + 1
            document.reserved_ids.add(result)
        logger.debug("generated id %s", result, document_uri=document_uri)
        return result

    def get_typed_value(self, document_uri: str, id: str) -> Optional[TypedValue]:
        check_document_uri(document_uri)
        check_id(id)
        document = self.get_document(document_uri)
        if document is None:
            return None
        with document.lock:
            obj = document.objects.get(id)
            if obj is None:
                return None
            return TypedValue(document_uri, id, obj.type)

    def get_all_items(
        self, document_uri: str, type: Optional[str] = None
    ) -> List[TypedValue]:
        check_document_uri(document_uri)
        document = self.get_document(document_uri)
        if document is None:
            return []
        with document.lock:
            return [
                TypedValue(document_uri, id, obj.type)
                for id, obj in document.objects.items()
                if type is None or obj.type == type
            ]

    def get_document_uris(self) -> List[str]:
        with self.lock:
            documents = list(self.documents.values())
        result = []
        for document in documents:
            with document.lock:
                if document.objects:
                    result.append(document.uri)
        return result

    def read_object(self, document_uri: str, id: str) -> ObjectSnapshot:
        with self.locked_object(document_uri, id, "read_object") as obj:
            return ObjectSnapshot(
                type=obj.type,
                values=dict(obj.values),
                value_lists={
                    name: list(elements) for name, elements in obj.value_lists.items()
                },
            )

    def check_snapshot(self, snapshot: ObjectSnapshot) -> None:
        check_type(snapshot.type)
        for name, value in snapshot.values.items():
            check_property_name(name)
            check_value(value)
            if name in snapshot.value_lists:
                raise InvalidInputError(
                    f"{name} is both a scalar and a list", origin="write_objects"
                )
        for name, elements in snapshot.value_lists.items():
            check_property_name(name)
            for value in elements:
                check_value(value)

    def write_objects(self, items: List[Tuple[str, str, ObjectSnapshot]]) -> None:
        keys = set()
        for document_uri, id, snapshot in items:
            check_document_uri(document_uri)
            check_id(id)
            self.check_snapshot(snapshot)
            if (document_uri, id) in keys:
                raise InvalidInputError(
                    f"{id} written twice in {document_uri}", origin="write_objects"
                )
            keys.add((document_uri, id))

        # Document locks are always taken in URI order
        documents = {
            uri: self.get_document(uri, create=True)
            for uri in sorted({document_uri for document_uri, _, _ in items})
        }
        with ExitStack() as stack:
            for document in documents.values():
                stack.enter_context(document.lock)

            for document_uri, id, snapshot in items:
                obj = documents[document_uri].objects.get(id)
                if obj is None:
                    continue
                if obj.type != snapshot.type:
                    raise TypeConflictError(
                        f"{id} has type {obj.type}, expecting {snapshot.type}",
                        origin="write_objects",
                    )
                conflicts = [
                    name for name in snapshot.values if name in obj.value_lists
                ] + [name for name in snapshot.value_lists if name in obj.values]
                if conflicts:
                    raise TypeConflictError(
                        f"property kind mismatch for {id}: {', '.join(conflicts)}",
                        origin="write_objects",
                    )

            for document_uri, id, snapshot in items:
                objects = documents[document_uri].objects
                obj = objects.get(id)
                if obj is None:
                    obj = objects[id] = StoredObject(snapshot.type)
                obj.values.update(snapshot.values)
                for name, elements in snapshot.value_lists.items():
                    obj.value_lists[name] = list(elements)
                logger.debug(
                    "wrote %s (%s)", id, snapshot.type, document_uri=document_uri
                )
