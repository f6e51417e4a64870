"""
Unit tests for connection-string parsing and per-engine validation.
"""

import pytest

from adminapi_core.config import DatabaseEngine
from adminapi_core.connection_strings import (
    ConnectionStringFormatError,
    parse_connection_string,
    validate_connection_string,
)


class TestParseConnectionString:
    """Tests for the key=value;... grammar."""

    def test_parses_simple_pairs(self):
        """Pairs separated by semicolons should be split and trimmed."""
        pairs = parse_connection_string(" Host = localhost ; Port=5432;")

        assert pairs == {"Host": "localhost", "Port": "5432"}

    def test_quoted_value_may_contain_separator(self):
        """A quoted value should keep semicolons as literal text."""
        pairs = parse_connection_string("Password='a;b';Host=x")

        assert pairs["Password"] == "a;b"
        assert pairs["Host"] == "x"

    def test_doubled_quote_is_literal(self):
        """A doubled quote inside a quoted value should become one quote."""
        pairs = parse_connection_string('Password="say ""hi"""')

        assert pairs["Password"] == 'say "hi"'

    def test_doubled_equals_in_key_is_literal(self):
        """'==' inside a key should become a literal '='."""
        pairs = parse_connection_string("a==b=c")

        assert pairs == {"a=b": "c"}

    def test_later_duplicate_wins(self):
        pairs = parse_connection_string("Host=a;Host=b")

        assert pairs == {"Host": "b"}

    @pytest.mark.parametrize(
        "connection_string",
        [
            "Host",
            "=value",
            "Host='unterminated",
            "Password='a'b",
            "Host=x\0y",
        ],
    )
    def test_malformed_strings_raise(self, connection_string):
        """Malformed strings should raise ConnectionStringFormatError."""
        with pytest.raises(ConnectionStringFormatError):
            parse_connection_string(connection_string)

    def test_empty_string_has_no_pairs(self):
        assert parse_connection_string("") == {}
        assert parse_connection_string(None) == {}


class TestValidatePostgresConnectionString:
    """Tests for the PostgreSQL keyword catalog."""

    def test_accepts_typical_string(self):
        result = validate_connection_string(
            DatabaseEngine.POSTGRESQL,
            "Host=localhost;Port=5432;Database=EdFi_Ods;Username=postgres;Password=secret",
        )

        assert result is True

    def test_keywords_ignore_case_and_spaces(self):
        """'SslMode' and 'SSL Mode' should both match the 'ssl mode' keyword."""
        assert validate_connection_string("PostgreSQL", "Host=x;SslMode=Require") is True
        assert validate_connection_string("PostgreSQL", "Host=x;SSL Mode=Require") is True

    def test_rejects_unknown_keyword(self):
        assert validate_connection_string("PostgreSQL", "Host=localhost;Bogus=1") is False

    def test_rejects_non_integer_port(self):
        assert validate_connection_string("PostgreSQL", "Host=localhost;Port=abc") is False

    def test_rejects_non_boolean_pooling(self):
        assert validate_connection_string("PostgreSQL", "Host=localhost;Pooling=maybe") is False

    def test_rejects_sql_server_only_keyword(self):
        assert validate_connection_string("PostgreSQL", "Data Source=.;Initial Catalog=EdFi_Ods") is False

    def test_rejects_unparseable_string(self):
        assert validate_connection_string("PostgreSQL", "Host='localhost") is False

    @pytest.mark.parametrize("connection_string", ["", "   ", ";", None])
    def test_accepts_empty_strings(self, connection_string):
        assert validate_connection_string("PostgreSQL", connection_string) is True


class TestValidateSqlServerConnectionString:
    """Tests for the SqlClient keyword catalog."""

    def test_accepts_integrated_security(self):
        result = validate_connection_string(
            DatabaseEngine.SQL_SERVER,
            "Data Source=(local);Initial Catalog=EdFi_Ods;Integrated Security=SSPI",
        )

        assert result is True

    def test_accepts_synonyms(self):
        assert validate_connection_string("SqlServer", "Server=.;Database=x;Trusted_Connection=yes") is True

    @pytest.mark.parametrize("mode", ["strict", "Mandatory", "optional", "true", "no"])
    def test_accepts_encrypt_modes(self, mode):
        assert validate_connection_string("SqlServer", f"Server=.;Encrypt={mode}") is True

    def test_rejects_unknown_encrypt_mode(self):
        assert validate_connection_string("SqlServer", "Server=.;Encrypt=bogus") is False

    def test_encrypt_does_not_accept_sspi(self):
        assert validate_connection_string("SqlServer", "Server=.;Encrypt=sspi") is False

    def test_rejects_unknown_keyword(self):
        assert validate_connection_string("SqlServer", "Server=.;Port=1433") is False

    def test_rejects_non_integer_timeout(self):
        assert validate_connection_string("SqlServer", "Server=.;Connect Timeout=soon") is False


class TestValidateUnknownEngine:
    """Tests for engines without a keyword catalog."""

    def test_unknown_engine_is_accepted(self):
        assert validate_connection_string("Oracle", "anything at all") is True
