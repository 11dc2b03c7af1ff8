from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Optional


class SPDXStoreError(Exception):
    """Exception raised by functions defined in spdx_store."""

    def __init__(self, message: Optional[str], origin: Optional[str] = None):
        """Initialize an SPDXStoreError.

        :param message: the exception message
        :param origin: the name of the store operation having raised the
            exception
        """
        super().__init__(message, origin)
        self.message = message
        self.origin = origin

    def __str__(self) -> str:
        error_msg = self.message or self.__class__.__name__
        if self.origin:
            return f"{self.origin}: {error_msg}"
        else:
            return error_msg


class NotFoundError(SPDXStoreError):
    """The addressed object does not exist."""

    pass


class AlreadyExistsError(SPDXStoreError):
    """An object with the same document URI and id is already present."""

    pass


class TypeConflictError(SPDXStoreError):
    """Scalar/list mismatch on a property, or object type mismatch."""

    pass


class InvalidInputError(SPDXStoreError):
    """Malformed identifier, type, property name or value."""

    pass
