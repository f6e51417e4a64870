"""
Persistence interfaces (Protocols) for the admin API.

Queries, validators and commands only ever talk to these contracts, so the
stores behind them can be swapped (in-memory, PostgreSQL, test doubles)
without touching the core.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, Protocol, TypeVar, runtime_checkable

from adminapi_core.domain.models import (
    ApiClient,
    ApiClientOdsInstance,
    Application,
    ApplicationEducationOrganization,
    OdsInstance,
    Profile,
    Vendor,
)
from adminapi_core.domain.security import (
    ActionRow,
    AuthorizationStrategyRow,
    ClaimSetRow,
    ResourceClaimRow,
)

T = TypeVar("T")


@runtime_checkable
class EntitySet(Protocol[T]):
    """A queryable collection of one entity type inside a unit of work."""

    def __iter__(self) -> Iterator[T]:
        ...

    def get(self, entity_id: int) -> T | None:
        """Return the entity with this identifier, or None."""
        ...

    def where(self, predicate: Callable[[T], bool]) -> list[T]:
        """Return every entity matching the predicate."""
        ...

    def add(self, entity: T) -> T:
        """Stage an entity for insertion on the next save.

        An entity with identifier 0 is given a fresh identifier immediately.
        """
        ...

    def remove(self, entity: T) -> None:
        """Stage an entity for deletion on the next save."""
        ...

    def remove_range(self, entities: Iterable[T]) -> None:
        """Stage several entities for deletion on the next save."""
        ...


@runtime_checkable
class ReadOnlySet(Protocol[T]):
    """A read-only collection of reference rows."""

    def __iter__(self) -> Iterator[T]:
        ...

    def get(self, entity_id: int) -> T | None:
        ...

    def where(self, predicate: Callable[[T], bool]) -> list[T]:
        ...


@runtime_checkable
class AdminContext(Protocol):
    """Unit of work over the admin store.

    Mutations are not visible outside the context until save_changes()
    commits them, and a failed or abandoned context commits nothing.
    """

    vendors: EntitySet[Vendor]
    applications: EntitySet[Application]
    profiles: EntitySet[Profile]
    ods_instances: EntitySet[OdsInstance]
    api_clients: EntitySet[ApiClient]
    application_education_organizations: EntitySet[ApplicationEducationOrganization]
    api_client_ods_instances: EntitySet[ApiClientOdsInstance]

    def save_changes(self) -> int:
        """Commit all pending mutations atomically.

        Returns:
            Number of rows inserted, updated or deleted.

        Raises:
            ConflictError: If a row being updated or deleted was changed by
                another unit of work after this one read it.
        """
        ...


@runtime_checkable
class SecurityContext(Protocol):
    """Read access to the security store."""

    claim_sets: ReadOnlySet[ClaimSetRow]
    resource_claims: ReadOnlySet[ResourceClaimRow]
    actions: ReadOnlySet[ActionRow]
    authorization_strategies: ReadOnlySet[AuthorizationStrategyRow]
