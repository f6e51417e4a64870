"""
PostgreSQL access for the admin and security stores.

This module provides a connection helper, a read-only SecurityContext that
loads claim-set reference rows, and an AdminContext whose save_changes() is a
single transaction. Every context reads fresh rows; nothing is cached between
contexts.

Admin tables live in the "admin" schema, one table per entity with one column
per entity field (list fields are arrays) and a serial primary key:

    admin.vendors (vendor_id serial, vendor_name text, namespace_prefixes text[])
    admin.profiles (profile_id serial, profile_name text, definition text)
    admin.ods_instances (ods_instance_id serial, name text unique, instance_type text,
                         connection_string text)
    admin.applications (application_id serial, application_name text, claim_set_name text,
                        vendor_id int, profile_ids int[], operational_context_uri text)
    admin.api_clients (api_client_id serial, application_id int, name text, key text,
                       secret text, is_approved bool, use_sandbox bool, sandbox_type int)
    admin.application_education_organizations (application_education_organization_id serial,
                       application_id int, education_organization_id int, api_client_ids int[])
    admin.api_client_ods_instances (api_client_ods_instance_id serial, api_client_id int,
                       ods_instance_id int)
"""

from __future__ import annotations

import copy
import dataclasses
import functools
from typing import Any

import psycopg
from loguru import logger
from psycopg import sql

from adminapi_core.config import settings
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
from adminapi_core.infrastructure.memory import ADMIN_TABLES, ReadOnlyRows, TableChanges, TrackedSet, entity_id


def get_db_connection(dsn: str | None = None):
    """
    Get a PostgreSQL database connection.

    Returns a context manager that can be used with 'with' statement.
    The connection is automatically closed when the context exits.

    Usage:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT claimsetid FROM dbo.claimsets")

    Args:
        dsn: Connection string. Defaults to settings.SECURITY_DSN.

    Returns:
        psycopg.Connection: A PostgreSQL connection.
    """
    try:
        conn = psycopg.connect(dsn or settings.SECURITY_DSN)
        logger.debug("Connected to PostgreSQL")
        return conn
    except Exception as e:
        logger.error(f"Failed to connect to PostgreSQL: {e}")
        raise


CLAIM_SETS_SQL = """
    SELECT claimsetid, claimsetname, isedfipreset, forapplicationuseonly
    FROM dbo.claimsets
"""

RESOURCE_CLAIMS_SQL = """
    SELECT resourceclaimid, resourcename, claimname, parentresourceclaimid
    FROM dbo.resourceclaims
"""

ACTIONS_SQL = """
    SELECT actionid, actionname, actionuri
    FROM dbo.actions
"""

AUTHORIZATION_STRATEGIES_SQL = """
    SELECT authorizationstrategyid, authorizationstrategyname, displayname
    FROM dbo.authorizationstrategies
"""


class PostgresSecurityContext:
    """
    SecurityContext that reads the security database.

    All four reference collections are read in one connection when the
    context is created, which gives validators a consistent snapshot.
    """

    def __init__(self, dsn: str | None = None):
        self.dsn = dsn or settings.SECURITY_DSN

        with get_db_connection(self.dsn) as conn:
            cursor = conn.cursor()

            cursor.execute(CLAIM_SETS_SQL)
            claim_sets = [
                ClaimSetRow(
                    claim_set_id=row[0],
                    claim_set_name=row[1],
                    is_edfi_preset=bool(row[2]),
                    for_application_use_only=bool(row[3]),
                )
                for row in cursor.fetchall()
            ]

            cursor.execute(RESOURCE_CLAIMS_SQL)
            resource_claims = [
                ResourceClaimRow(
                    resource_claim_id=row[0],
                    resource_name=row[1],
                    claim_name=row[2] or "",
                    parent_resource_claim_id=row[3],
                )
                for row in cursor.fetchall()
            ]

            cursor.execute(ACTIONS_SQL)
            actions = [
                ActionRow(action_id=row[0], action_name=row[1], action_uri=row[2] or "")
                for row in cursor.fetchall()
            ]

            cursor.execute(AUTHORIZATION_STRATEGIES_SQL)
            strategies = [
                AuthorizationStrategyRow(
                    authorization_strategy_id=row[0],
                    authorization_strategy_name=row[1],
                    display_name=row[2] or "",
                )
                for row in cursor.fetchall()
            ]

        self.claim_sets = ReadOnlyRows(claim_sets)
        self.resource_claims = ReadOnlyRows(resource_claims)
        self.actions = ReadOnlyRows(actions)
        self.authorization_strategies = ReadOnlyRows(strategies)

        logger.debug(
            f"Loaded security snapshot: {len(claim_sets)} claim sets, "
            f"{len(resource_claims)} resource claims"
        )


ADMIN_SCHEMA = "admin"


def _columns(entity_type: type) -> list[str]:
    return [f.name for f in dataclasses.fields(entity_type)]


def _select_sql(table_name: str, for_update: bool = False) -> sql.Composed:
    entity_type = ADMIN_TABLES[table_name]
    query = sql.SQL("SELECT {columns} FROM {table}").format(
        columns=sql.SQL(", ").join(map(sql.Identifier, _columns(entity_type))),
        table=sql.Identifier(ADMIN_SCHEMA, table_name),
    )
    if for_update:
        query += sql.SQL(" WHERE {id} = ANY(%s) FOR UPDATE").format(id=sql.Identifier(entity_type.id_field))
    return query


def _insert_sql(table_name: str) -> sql.Composed:
    columns = _columns(ADMIN_TABLES[table_name])
    return sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
        table=sql.Identifier(ADMIN_SCHEMA, table_name),
        columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
        values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
    )


def _update_sql(table_name: str) -> sql.Composed:
    entity_type = ADMIN_TABLES[table_name]
    columns = [c for c in _columns(entity_type) if c != entity_type.id_field]
    return sql.SQL("UPDATE {table} SET {assignments} WHERE {id} = %s").format(
        table=sql.Identifier(ADMIN_SCHEMA, table_name),
        assignments=sql.SQL(", ").join(sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns),
        id=sql.Identifier(entity_type.id_field),
    )


def _delete_sql(table_name: str) -> sql.Composed:
    return sql.SQL("DELETE FROM {table} WHERE {id} = %s").format(
        table=sql.Identifier(ADMIN_SCHEMA, table_name),
        id=sql.Identifier(ADMIN_TABLES[table_name].id_field),
    )


def _to_entities(table_name: str, rows: list[tuple]) -> dict[int, Any]:
    entity_type = ADMIN_TABLES[table_name]
    entities = [entity_type(*row) for row in rows]
    return {entity_id(entity): entity for entity in entities}


class PostgresAdminStore:
    """Admin store in PostgreSQL. Opens one AdminContext per unit of work."""

    def __init__(self, dsn: str | None = None):
        self.dsn = dsn or settings.ADMIN_DSN

    def context(self) -> "PostgresAdminContext":
        return PostgresAdminContext(self.dsn)


class PostgresAdminContext:
    """
    AdminContext over the admin database.

    A table is read the first time the context touches it. Identifiers come
    from the tables' serial sequences when an entity is added. save_changes()
    locks every row it updates or deletes, checks that none changed since it
    was read, and writes the whole delta in one transaction.
    """

    def __init__(self, dsn: str | None = None):
        self.dsn = dsn or settings.ADMIN_DSN
        self._sets: dict[str, TrackedSet] = {
            name: TrackedSet(
                entity_type,
                functools.partial(self._load, name),
                functools.partial(self._next_id, name),
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

    def _load(self, table_name: str) -> dict[int, Any]:
        with get_db_connection(self.dsn) as conn:
            cursor = conn.cursor()
            cursor.execute(_select_sql(table_name))
            rows = cursor.fetchall()
        return _to_entities(table_name, rows)

    def _next_id(self, table_name: str) -> int:
        with get_db_connection(self.dsn) as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT nextval(pg_get_serial_sequence(%s, %s))",
                (f"{ADMIN_SCHEMA}.{table_name}", ADMIN_TABLES[table_name].id_field),
            )
            row = cursor.fetchone()
        return row[0]

    def save_changes(self) -> int:
        changes = {name: tracked.pending_changes() for name, tracked in self._sets.items()}
        pending = {name: change for name, change in changes.items() if change}
        if not pending:
            return 0

        with get_db_connection(self.dsn) as conn:
            cursor = conn.cursor()

            for table_name, change in pending.items():
                self._check_unchanged(cursor, table_name, change)

            # Children first for deletes, parents first for writes
            for table_name in reversed(ADMIN_TABLES):
                if table_name in pending:
                    for row_id in pending[table_name].removed:
                        cursor.execute(_delete_sql(table_name), (row_id,))

            for table_name in ADMIN_TABLES:
                change = pending.get(table_name)
                if change is None:
                    continue
                id_field = ADMIN_TABLES[table_name].id_field
                for entity in change.modified:
                    values = [getattr(entity, c) for c in _columns(type(entity)) if c != id_field]
                    cursor.execute(_update_sql(table_name), [*values, entity_id(entity)])
                for entity in change.added:
                    cursor.execute(_insert_sql(table_name), [getattr(entity, c) for c in _columns(type(entity))])

            conn.commit()

        for name, tracked in self._sets.items():
            tracked.accept_changes({entity_id(row): copy.deepcopy(row) for row in changes[name].saved()})

        count = sum(len(change) for change in pending.values())
        logger.debug(f"Committed {count} admin database change(s)")
        return count

    @staticmethod
    def _check_unchanged(cursor, table_name: str, change: TableChanges) -> None:
        if not change.originals:
            return
        cursor.execute(_select_sql(table_name, for_update=True), (list(change.originals),))
        current = _to_entities(table_name, cursor.fetchall())
        for row_id, original in change.originals.items():
            if current.get(row_id) != original:
                raise ConflictError(table_name, row_id)
