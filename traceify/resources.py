"""Revocable handles for displayable resources."""
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceHandle:
    """Reference to bytes published under a URI."""
    uri: str
    media_type: str
    size: int


class ResourceStore:
    """
    Holds resource bytes until their handle is revoked.

    Every created handle must be revoked once it is superseded,
    otherwise its bytes stay alive for the lifetime of the store.
    """

    def __init__(self, scheme: str = "blob:traceify"):
        self.scheme = scheme
        self._data: Dict[str, bytes] = {}

    def create(self, data: bytes, media_type: str) -> ResourceHandle:
        """Publish bytes and return a handle to them."""
        uri = f"{self.scheme}/{uuid.uuid4()}"
        self._data[uri] = bytes(data)
        logger.debug(f"Created {media_type} resource {uri} ({len(data)} bytes)")
        return ResourceHandle(uri=uri, media_type=media_type, size=len(data))

    def revoke(self, handle: Optional[ResourceHandle]) -> None:
        """Release a handle. Revoking None or a revoked handle is a no-op."""
        if handle is None:
            return
        if self._data.pop(handle.uri, None) is not None:
            logger.debug(f"Revoked resource {handle.uri}")

    def read(self, handle: ResourceHandle) -> bytes:
        """
        Return the bytes behind a live handle.

        Raises:
            KeyError: If the handle was revoked
        """
        try:
            return self._data[handle.uri]
        except KeyError:
            raise KeyError(f"Resource has been revoked: {handle.uri}") from None

    def is_live(self, handle: ResourceHandle) -> bool:
        return handle.uri in self._data

    @property
    def live_count(self) -> int:
        return len(self._data)
