"""
Interfaces to collaborators that live outside the search service.

- ResourceImporter persists a canonical resource into a caller-owned
  container (a course, a folder, a reading list). It maps the resource
  type into its own storage taxonomy.
- UsageGate is consulted before expensive operations and raises
  UsageLimitExceededError to reject them. Search and browsing are not
  gated.
"""
from typing import Any, Dict, Protocol, runtime_checkable

from campusmind.core.exceptions import ResourceImportError
from campusmind.core.logging import get_logger
from campusmind.schemas import ImportRequest

logger = get_logger(__name__)

IMPORT_OPERATION = "resource_import"


@runtime_checkable
class ResourceImporter(Protocol):
    async def import_resource(self, request: ImportRequest) -> Dict[str, Any]:
        """Persist request.resource into request.container_id and return the stored record."""
        ...


@runtime_checkable
class UsageGate(Protocol):
    async def check(self, operation: str) -> None:
        """Raise UsageLimitExceededError when the operation is not allowed."""
        ...


class AllowAllGate:
    """Gate used when no usage-limit service is configured."""

    async def check(self, operation: str) -> None:
        logger.debug(f"Usage gate: allowing {operation}")


class UnconfiguredImporter:
    """Importer used when no persistence service is configured."""

    async def import_resource(self, request: ImportRequest) -> Dict[str, Any]:
        raise ResourceImportError(request.container_id, "no resource importer configured")
