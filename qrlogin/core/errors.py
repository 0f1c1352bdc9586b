"""Typed errors surfaced to callers of the challenge issuer."""

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ARGUMENT = "invalid-argument"
    PERMISSION_DENIED = "permission-denied"
    INTERNAL = "internal"


HTTP_STATUS_BY_KIND = {
    ErrorKind.INVALID_ARGUMENT: 400,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.INTERNAL: 500,
}


class ChallengeError(Exception):
    """
    Issuance failed. Carries a kind and a human readable message.

    Internal errors keep the lower-level exception as __cause__.
    """

    def __init__(self, kind: ErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict:
        return {"error": {"status": self.kind.value, "message": self.message}}


class StoreError(Exception):
    """Base class for document store failures."""


class DocumentExistsError(StoreError):
    """A create-if-absent write found a document at the same key."""

    def __init__(self, collection: str, key: str):
        self.collection = collection
        self.key = key
        super().__init__(f"Document {collection}/{key[:12]}... already exists")


class DocumentNotFoundError(StoreError):
    """No document at the given key."""


class PreconditionFailedError(StoreError):
    """The document did not satisfy the condition attached to a write."""
