"""
Connection-string validation for ODS instances.

Both supported engines use the ``key=value;key=value`` grammar shared by the
SqlClient and Npgsql connection-string builders: values may be quoted with
single or double quotes (a doubled quote inside is a literal quote) and a
doubled ``==`` inside a key is a literal ``=``. A string is valid when it
parses and every keyword belongs to the engine's keyword catalog.
"""

from __future__ import annotations

import re

from loguru import logger

from adminapi_core.config import DatabaseEngine

_INTEGER = re.compile(r"^[+-]?\d+$")


class ConnectionStringFormatError(ValueError):
    """The string does not conform to the connection-string grammar."""


def parse_connection_string(connection_string: str | None) -> dict[str, str]:
    """
    Split a connection string into keyword/value pairs.

    Keys are returned as written (trimmed). Later duplicates win, as in the
    .NET builders.

    Raises:
        ConnectionStringFormatError: If the string is malformed.
    """
    pairs: dict[str, str] = {}
    text = connection_string or ""
    length = len(text)
    index = 0

    while index < length:
        # Skip separators and whitespace between pairs
        while index < length and (text[index].isspace() or text[index] == ";"):
            index += 1
        if index >= length:
            break

        start = index
        key_chars: list[str] = []
        while True:
            if index >= length or text[index] == ";":
                raise ConnectionStringFormatError(
                    f"Format of the initialization string does not conform to specification starting at index {start}."
                )
            char = text[index]
            if char == "=":
                if index + 1 < length and text[index + 1] == "=":
                    key_chars.append("=")
                    index += 2
                    continue
                index += 1
                break
            key_chars.append(char)
            index += 1

        key = "".join(key_chars).strip()
        if not key:
            raise ConnectionStringFormatError(f"Empty keyword starting at index {start}.")

        while index < length and text[index].isspace() and text[index] != ";":
            index += 1

        if index < length and text[index] in "'\"":
            quote = text[index]
            index += 1
            value_chars: list[str] = []
            while True:
                if index >= length:
                    raise ConnectionStringFormatError(f"Unterminated quoted value for keyword '{key}'.")
                char = text[index]
                if char == quote:
                    if index + 1 < length and text[index + 1] == quote:
                        value_chars.append(quote)
                        index += 2
                        continue
                    index += 1
                    break
                value_chars.append(char)
                index += 1
            while index < length and text[index].isspace():
                index += 1
            if index < length and text[index] != ";":
                raise ConnectionStringFormatError(
                    f"Unexpected characters after quoted value for keyword '{key}'."
                )
            value = "".join(value_chars)
        else:
            end = text.find(";", index)
            if end == -1:
                end = length
            value = text[index:end].strip()
            if "\0" in value:
                raise ConnectionStringFormatError(f"Invalid unquoted value for keyword '{key}'.")
            index = end

        pairs[key] = value

    return pairs


class KeywordCatalog:
    """Keywords an engine's connection-string builder accepts."""

    def __init__(
        self,
        keywords: set[str],
        booleans: set[str],
        integers: set[str],
        boolean_values: set[str],
        enumerated: dict[str, set[str]] | None = None,
        ignore_spaces: bool = False,
    ):
        """
        Args:
            keywords: Keywords taking any value.
            booleans: Keywords whose value must be one of boolean_values.
            integers: Keywords whose value must be an integer.
            boolean_values: Accepted boolean spellings, lowercase.
            enumerated: Keywords with their own set of accepted values, lowercase.
            ignore_spaces: Whether spaces inside keywords are insignificant.
        """
        self.ignore_spaces = ignore_spaces
        self.enumerated = {self.normalize(k): v for k, v in (enumerated or {}).items()}
        self.keywords = {self.normalize(k) for k in keywords | booleans | integers} | set(self.enumerated)
        self.booleans = {self.normalize(k) for k in booleans}
        self.integers = {self.normalize(k) for k in integers}
        self.boolean_values = boolean_values

    def normalize(self, keyword: str) -> str:
        if self.ignore_spaces:
            return "".join(keyword.lower().split())
        return " ".join(keyword.lower().split())

    def check(self, pairs: dict[str, str]) -> None:
        for key, value in pairs.items():
            keyword = self.normalize(key)
            if keyword not in self.keywords:
                raise ConnectionStringFormatError(f"Keyword not supported: '{key}'.")
            if keyword in self.booleans and value.lower() not in self.boolean_values:
                raise ConnectionStringFormatError(f"Invalid value for key '{key}'.")
            if keyword in self.integers and not _INTEGER.match(value):
                raise ConnectionStringFormatError(f"Invalid value for key '{key}'.")
            if keyword in self.enumerated and value.lower() not in self.enumerated[keyword]:
                raise ConnectionStringFormatError(f"Invalid value for key '{key}'.")


SQL_SERVER_KEYWORDS = KeywordCatalog(
    keywords={
        "application intent", "applicationintent", "application name", "app",
        "attachdbfilename", "extended properties", "initial file name",
        "current language", "language", "data source", "server", "address",
        "addr", "network address", "failover partner", "initial catalog",
        "database", "network library", "net", "network", "password", "pwd",
        "transaction binding", "type system version", "user id", "uid", "user",
        "workstation id", "wsid", "column encryption setting", "authentication",
        "pool blocking period", "poolblockingperiod", "ip address preference",
        "ipaddresspreference", "host name in certificate",
        "hostnameincertificate", "server certificate", "servercertificate",
        "attestation protocol", "enclave attestation url", "server spn",
        "serverspn", "failover partner spn", "failoverpartnerspn",
    },
    booleans={
        "enlist", "integrated security", "trusted_connection",
        "multiple active result sets", "multipleactiveresultsets",
        "multi subnet failover", "multisubnetfailover", "persist security info",
        "persistsecurityinfo", "pooling", "replication",
        "trust server certificate", "trustservercertificate", "user instance",
        "context connection",
    },
    integers={
        "command timeout", "connect retry count", "connectretrycount",
        "connect retry interval", "connectretryinterval", "connect timeout",
        "connection timeout", "timeout", "load balance timeout",
        "connection lifetime", "max pool size", "min pool size", "packet size",
    },
    boolean_values={"true", "false", "yes", "no", "sspi"},
    enumerated={
        "encrypt": {"true", "false", "yes", "no", "strict", "mandatory", "optional"},
    },
)

POSTGRESQL_KEYWORDS = KeywordCatalog(
    keywords={
        "host", "server", "database", "db", "username", "user name", "user id",
        "uid", "user", "password", "psw", "pwd", "passfile", "application name",
        "search path", "client encoding", "encoding", "timezone", "ssl mode",
        "ssl certificate", "ssl key", "ssl password", "root certificate",
        "kerberos service name", "krbsrvname", "channel binding",
        "target session attributes", "options", "server compatibility mode",
        "array nullability mode", "load table composites",
    },
    booleans={
        "pooling", "enlist", "integrated security", "persist security info",
        "log parameters", "include error detail", "include realm",
        "tcp keepalive", "trust server certificate",
        "check certificate revocation", "no reset on close", "multiplexing",
        "load balance hosts",
    },
    integers={
        "port", "timeout", "command timeout", "cancellation timeout",
        "internal command timeout", "minimum pool size", "min pool size",
        "maximum pool size", "max pool size", "connection idle lifetime",
        "connection pruning interval", "connection lifetime",
        "load balance timeout", "keepalive", "tcp keepalive time",
        "tcp keepalive interval", "read buffer size", "write buffer size",
        "socket receive buffer size", "socket send buffer size",
        "max auto prepare", "auto prepare min usages", "host recheck seconds",
        "write coalescing buffer threshold bytes",
    },
    boolean_values={"true", "false"},
    ignore_spaces=True,
)

CATALOGS: dict[DatabaseEngine, KeywordCatalog] = {
    DatabaseEngine.SQL_SERVER: SQL_SERVER_KEYWORDS,
    DatabaseEngine.POSTGRESQL: POSTGRESQL_KEYWORDS,
}


def validate_connection_string(database_engine: DatabaseEngine | str, connection_string: str | None) -> bool:
    """
    Check that a connection string parses under the engine's grammar.

    Only syntax and keywords are checked; the target is never contacted.

    Args:
        database_engine: "SqlServer" or "PostgreSQL".
        connection_string: The string to check.

    Returns:
        False if the string is malformed for the engine, True otherwise.
        Unrecognised engines are accepted.
    """
    try:
        engine = DatabaseEngine(database_engine)
    except ValueError:
        logger.warning(f"Unknown database engine '{database_engine}'; connection string not checked")
        return True

    try:
        CATALOGS[engine].check(parse_connection_string(connection_string))
    except ConnectionStringFormatError as e:
        logger.debug(f"Rejected {engine.value} connection string: {e}")
        return False
    return True
