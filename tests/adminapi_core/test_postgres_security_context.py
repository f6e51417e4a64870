"""
Unit tests for PostgresSecurityContext.

Uses a mocked psycopg connection; no database is required.
"""

from unittest.mock import MagicMock, patch

import pytest

from adminapi_core.infrastructure.postgres import PostgresSecurityContext, get_db_connection


class TestPostgresSecurityContext:
    """Tests for loading the security snapshot."""

    def test_loads_all_collections(self, mock_postgres):
        context = PostgresSecurityContext(dsn="host=db")

        assert context.claim_sets.get(1).claim_set_name == "SIS Vendor"
        assert context.claim_sets.get(1).is_edfi_preset is True
        assert context.resource_claims.get(2).parent_resource_claim_id == 1
        assert context.resource_claims.get(1).parent_resource_claim_id is None
        assert [a.action_name for a in context.actions] == ["Create", "Read"]
        assert context.authorization_strategies.get(1).authorization_strategy_name == "NamespaceBased"

    def test_uses_given_dsn(self, mock_postgres):
        PostgresSecurityContext(dsn="host=db")

        mock_postgres["get_connection"].assert_called_once_with("host=db")

    def test_queries_security_tables(self, mock_postgres):
        PostgresSecurityContext(dsn="host=db")

        queries = " ".join(str(c.args[0]).lower() for c in mock_postgres["cursor"].execute.call_args_list)
        assert "dbo.claimsets" in queries
        assert "dbo.resourceclaims" in queries
        assert "dbo.actions" in queries
        assert "dbo.authorizationstrategies" in queries


class TestGetDbConnection:
    def test_connection_failure_propagates(self):
        with patch("adminapi_core.infrastructure.postgres.psycopg.connect", side_effect=RuntimeError("down")):
            with pytest.raises(RuntimeError):
                get_db_connection("host=nowhere")


# --- Fixtures ---


@pytest.fixture
def mock_postgres():
    """Provides mock PostgreSQL connection and cursor with security rows."""
    with patch("adminapi_core.infrastructure.postgres.get_db_connection") as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()

        mock_conn.cursor.return_value = mock_cursor
        mock_conn.__enter__ = MagicMock(return_value=mock_conn)
        mock_conn.__exit__ = MagicMock(return_value=False)
        mock_cursor.fetchall.side_effect = [
            [(1, "SIS Vendor", True, False), (2, "Mine", False, False)],
            [(1, "educationOrganizations", "http://claims/edorgs", None), (2, "school", None, 1)],
            [(1, "Create", "http://actions/create"), (2, "Read", None)],
            [(1, "NamespaceBased", "Namespace Based")],
        ]

        mock_get_conn.return_value = mock_conn

        yield {
            "get_connection": mock_get_conn,
            "connection": mock_conn,
            "cursor": mock_cursor,
        }
