"""
In-memory admin and security stores, and the change tracking shared by every
admin store backend.

Committed rows are never mutated in place: a commit installs new table
mappings holding fresh copies of the rows it wrote. Opening a context is
therefore just a reference to the current tables, and a table is only
copied when the context first reads it. save_changes() checks that every row
it updates or deletes is still the row the context read, then applies the
whole delta under a lock, or nothing.
"""

from __future__ import annotations

import copy
import functools
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

from loguru import logger

from adminapi_core.domain.exceptions import ConflictError
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

# Parents before children: inserts follow this order, deletes the reverse
ADMIN_TABLES: dict[str, type] = {
    "vendors": Vendor,
    "profiles": Profile,
    "ods_instances": OdsInstance,
    "applications": Application,
    "api_clients": ApiClient,
    "application_education_organizations": ApplicationEducationOrganization,
    "api_client_ods_instances": ApiClientOdsInstance,
}


def entity_id(entity: Any) -> int:
    return getattr(entity, type(entity).id_field)


@dataclass
class TableChanges:
    """Pending changes of one table.

    originals maps the id of every modified or removed row to the row as it
    was read, so the store can detect concurrent changes.
    """

    added: list = field(default_factory=list)
    modified: list = field(default_factory=list)
    removed: set[int] = field(default_factory=set)
    originals: dict[int, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.added or self.modified or self.removed)

    def __len__(self) -> int:
        return len(self.added) + len(self.modified) + len(self.removed)

    def saved(self) -> list:
        """Rows written by this change set."""
        return self.added + self.modified


class TrackedSet(Generic[T]):
    """Entity collection with pending inserts, updates and deletes.

    Rows are loaded and copied on first access. Identifiers are assigned
    when an entity is added, so rows staged in the same unit of work can
    reference each other before the commit.
    """

    def __init__(self, entity_type: type[T], load: Callable[[], dict[int, T]], allocate_id: Callable[[], int]):
        self.entity_type = entity_type
        self._load = load
        self._allocate_id = allocate_id
        self._loaded: dict[int, T] | None = None
        self._originals: dict[int, T] = {}
        self._added: dict[int, T] = {}
        self._removed: set[int] = set()

    @property
    def _rows(self) -> dict[int, T]:
        if self._loaded is None:
            committed = self._load()
            self._originals = dict(committed)
            self._loaded = copy.deepcopy(committed)
        return self._loaded

    def __iter__(self) -> Iterator[T]:
        rows = self._rows
        for row_id in sorted(rows):
            if row_id not in self._removed:
                yield rows[row_id]
        yield from list(self._added.values())

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def get(self, row_id: int) -> T | None:
        if row_id in self._added:
            return self._added[row_id]
        if row_id in self._removed:
            return None
        return self._rows.get(row_id)

    def where(self, predicate: Callable[[T], bool]) -> list[T]:
        return [entity for entity in self if predicate(entity)]

    def add(self, entity: T) -> T:
        if not isinstance(entity, self.entity_type):
            raise TypeError(f"Expected {self.entity_type.__name__}, got {type(entity).__name__}")
        row_id = entity_id(entity)
        if not row_id:
            row_id = self._allocate_id()
            setattr(entity, self.entity_type.id_field, row_id)
        elif row_id in self._added or (row_id in self._rows and row_id not in self._removed):
            raise ValueError(f"{self.entity_type.__name__} {row_id} already exists")
        self._added[row_id] = entity
        return entity

    def remove(self, entity: T) -> None:
        row_id = entity_id(entity)
        if self._added.get(row_id) is entity:
            del self._added[row_id]
            return
        if row_id not in self._rows or row_id in self._removed:
            raise KeyError(f"{self.entity_type.__name__} {row_id} is not tracked by this context")
        self._removed.add(row_id)

    def remove_range(self, entities: Iterable[T]) -> None:
        for entity in list(entities):
            self.remove(entity)

    def pending_changes(self) -> TableChanges:
        """Return what changed since the rows were read or last saved."""
        if self._loaded is None:
            return TableChanges(added=list(self._added.values()))
        modified = [
            row
            for row_id, row in self._loaded.items()
            if row_id not in self._removed and row != self._originals.get(row_id)
        ]
        originals = {entity_id(row): self._originals[entity_id(row)] for row in modified}
        originals.update({row_id: self._originals[row_id] for row_id in self._removed})
        return TableChanges(
            added=list(self._added.values()),
            modified=modified,
            removed=set(self._removed),
            originals=originals,
        )

    def accept_changes(self, committed: dict[int, T]) -> None:
        """Fold saved changes into the tracked rows.

        Args:
            committed: The rows as the store now holds them, by id. Used as
                the originals of the rows just written.
        """
        if self._loaded is None and not self._added:
            return
        loaded = self._rows
        for row_id in self._removed:
            loaded.pop(row_id, None)
            self._originals.pop(row_id, None)
        loaded.update(self._added)
        for row in list(loaded.values()):
            row_id = entity_id(row)
            if row_id in self._added or row != self._originals.get(row_id):
                self._originals[row_id] = committed[row_id]
        self._added = {}
        self._removed = set()


class InMemoryAdminStore:
    """Committed admin rows shared by every context opened on the store."""

    def __init__(self):
        self._tables: dict[str, dict[int, Any]] = {name: {} for name in ADMIN_TABLES}
        self._sequences: dict[str, int] = {name: 0 for name in ADMIN_TABLES}
        self._lock = threading.Lock()

    def context(self) -> "InMemoryAdminContext":
        """Open a new unit of work on the currently committed rows."""
        with self._lock:
            return InMemoryAdminContext(self, dict(self._tables))

    def seed(self, *entities: Any) -> None:
        """Insert entities in one commit, assigning identifiers in place."""
        context = self.context()
        for entity in entities:
            getattr(context, _table_for(entity)).add(entity)
        context.save_changes()

    def next_id(self, table_name: str) -> int:
        """Reserve the next identifier of a table. Unused ids are never reissued."""
        with self._lock:
            self._sequences[table_name] += 1
            return self._sequences[table_name]

    def commit(self, changes: dict[str, TableChanges]) -> dict[str, dict[int, Any]]:
        """Apply every table's changes, or none of them.

        Returns:
            The committed tables after the changes.

        Raises:
            ConflictError: If a row being updated or deleted was changed or
                deleted since it was read, or an inserted id is taken.
        """
        with self._lock:
            tables = dict(self._tables)
            sequences = dict(self._sequences)

            for table_name, change in changes.items():
                if not change:
                    continue
                table = dict(tables[table_name])
                for row_id, original in change.originals.items():
                    if table.get(row_id) is not original:
                        raise ConflictError(table_name, row_id)

                for row_id in change.removed:
                    del table[row_id]
                for entity in change.modified:
                    table[entity_id(entity)] = copy.deepcopy(entity)
                for entity in change.added:
                    row_id = entity_id(entity)
                    if row_id in table:
                        raise ConflictError(table_name, row_id)
                    sequences[table_name] = max(sequences[table_name], row_id)
                    table[row_id] = copy.deepcopy(entity)
                tables[table_name] = table

            self._tables = tables
            self._sequences = sequences
            return tables


def _table_for(entity: Any) -> str:
    for name, entity_type in ADMIN_TABLES.items():
        if isinstance(entity, entity_type):
            return name
    raise TypeError(f"{type(entity).__name__} is not an admin store entity")


class InMemoryAdminContext:
    """AdminContext implementation backed by an InMemoryAdminStore."""

    def __init__(self, store: InMemoryAdminStore, tables: dict[str, dict[int, Any]]):
        self._store = store
        self._sets: dict[str, TrackedSet] = {
            name: TrackedSet(
                entity_type,
                functools.partial(tables.__getitem__, name),
                functools.partial(store.next_id, name),
            )
            for name, entity_type in ADMIN_TABLES.items()
        }
        self.vendors: TrackedSet[Vendor] = self._sets["vendors"]
        self.applications: TrackedSet[Application] = self._sets["applications"]
        self.profiles: TrackedSet[Profile] = self._sets["profiles"]
        self.ods_instances: TrackedSet[OdsInstance] = self._sets["ods_instances"]
        self.api_clients: TrackedSet[ApiClient] = self._sets["api_clients"]
        self.application_education_organizations: TrackedSet[ApplicationEducationOrganization] = (
            self._sets["application_education_organizations"]
        )
        self.api_client_ods_instances: TrackedSet[ApiClientOdsInstance] = self._sets["api_client_ods_instances"]

    def save_changes(self) -> int:
        changes = {name: tracked.pending_changes() for name, tracked in self._sets.items()}
        committed = self._store.commit(changes)
        for name, tracked in self._sets.items():
            tracked.accept_changes(committed[name])
        count = sum(len(change) for change in changes.values())
        logger.debug(f"Committed {count} admin store change(s)")
        return count


class ReadOnlyRows(Generic[T]):
    """Read-only view over a list of reference rows."""

    def __init__(self, rows: Iterable[T]):
        self._rows = {entity_id(row): row for row in copy.deepcopy(list(rows))}

    def __iter__(self) -> Iterator[T]:
        for row_id in sorted(self._rows):
            yield self._rows[row_id]

    def get(self, row_id: int) -> T | None:
        return self._rows.get(row_id)

    def where(self, predicate: Callable[[T], bool]) -> list[T]:
        return [row for row in self if predicate(row)]


class InMemorySecurityStore:
    """Security store reference data held in memory."""

    def __init__(
        self,
        claim_sets: Iterable[ClaimSetRow] = (),
        resource_claims: Iterable[ResourceClaimRow] = (),
        actions: Iterable[ActionRow] = (),
        authorization_strategies: Iterable[AuthorizationStrategyRow] = (),
    ):
        self.claim_sets = list(claim_sets)
        self.resource_claims = list(resource_claims)
        self.actions = list(actions)
        self.authorization_strategies = list(authorization_strategies)

    def context(self) -> "InMemorySecurityContext":
        return InMemorySecurityContext(self)


class InMemorySecurityContext:
    """SecurityContext implementation over an InMemorySecurityStore."""

    def __init__(self, store: InMemorySecurityStore):
        self.claim_sets = ReadOnlyRows(store.claim_sets)
        self.resource_claims = ReadOnlyRows(store.resource_claims)
        self.actions = ReadOnlyRows(store.actions)
        self.authorization_strategies = ReadOnlyRows(store.authorization_strategies)
