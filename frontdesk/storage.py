"""
Identity-proof storage.

Guests hand over a photo of an identity document at booking time. Storing
the image belongs to an external provider; the service only needs a public
reference back.
"""

from typing import Protocol


class StorageError(Exception):
    pass


class IdentityProofStore(Protocol):
    def upload_image(self, data: str) -> str:
        """Store ``data`` (a URL or data URI) and return its public URL."""
        ...


class PassthroughProofStore:
    """Keeps the reference the client sent as the stored URL."""

    def upload_image(self, data: str) -> str:
        if not data:
            raise StorageError('No identity proof supplied')
        return data
