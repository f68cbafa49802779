"""
Database Infrastructure
=======================

Opens and verifies the relational database connection.

Uses SQLAlchemy 2.0 with PyMySQL for MySQL. Any SQLAlchemy URL works; a
Go-style MySQL DSN (``user:pass@tcp(host:3306)/db?charset=utf8mb4``) is
rewritten to its SQLAlchemy form first.
"""

import re
from urllib.parse import parse_qsl

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend_bootstrap.core import DatabaseConnectionException, ReleaseException
from backend_bootstrap.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

MYSQL_DRIVER = "mysql+pymysql"
DEFAULT_MYSQL_PORT = 3306

# [user[:password]@][net[(addr)]]/dbname[?param1=value1&paramN=valueN]
_GO_MYSQL_DSN = re.compile(
    r"^(?:(?P<user>[^:@/]*)(?::(?P<password>.*))?@)?"
    r"(?P<net>[a-z0-9]*)(?:\((?P<addr>[^)]*)\))?"
    r"/(?P<database>[^?]*)(?:\?(?P<params>.*))?$"
)

# Go driver options that PyMySQL does not accept as connect arguments.
_GO_ONLY_PARAMS = {
    "parseTime",
    "loc",
    "allowNativePasswords",
    "timeout",
    "readTimeout",
    "writeTimeout",
}


def _from_go_dsn(dsn: str) -> URL:
    match = _GO_MYSQL_DSN.match(dsn)
    if match is None:
        raise DatabaseConnectionException("unparsable DSN", {"dsn_format": "unknown"})

    net = match.group("net") or "tcp"
    addr = match.group("addr") or ""
    query = {
        key: value
        for key, value in parse_qsl(match.group("params") or "", keep_blank_values=True)
        if key not in _GO_ONLY_PARAMS
    }

    host = None
    port = None
    if net == "unix":
        query["unix_socket"] = addr
    elif net == "tcp":
        host, _, port_text = addr.rpartition(":") if ":" in addr else (addr, "", "")
        host = host or "127.0.0.1"
        try:
            port = int(port_text) if port_text else DEFAULT_MYSQL_PORT
        except ValueError as e:
            raise DatabaseConnectionException(
                f"invalid port in DSN address '{addr}'"
            ) from e
    else:
        raise DatabaseConnectionException(f"unsupported DSN network '{net}'")

    return URL.create(
        MYSQL_DRIVER,
        username=match.group("user") or None,
        password=match.group("password") or None,
        host=host,
        port=port,
        database=match.group("database") or None,
        query=query,
    )


def normalize_dsn(dsn: str) -> URL:
    """
    Turn a configured DSN into a SQLAlchemy URL.

    Args:
        dsn: SQLAlchemy URL or Go-style MySQL DSN

    Returns:
        URL: Parsed SQLAlchemy URL

    Raises:
        DatabaseConnectionException: If the DSN is empty or cannot be parsed
    """
    dsn = dsn.strip()
    if not dsn:
        raise DatabaseConnectionException("empty DSN")
    if "://" in dsn:
        try:
            return make_url(dsn)
        except (ArgumentError, ValueError) as e:
            raise DatabaseConnectionException(f"unparsable DSN: {e}") from e
    return _from_go_dsn(dsn)


def connect_database(dsn: str) -> Engine:
    """
    Open the database engine and run a ``SELECT 1`` probe through an ORM session.

    The engine is disposed again if the probe fails.

    Returns:
        Engine: A verified SQLAlchemy engine

    Raises:
        DatabaseConnectionException: If the engine cannot be created or probed
    """
    url = normalize_dsn(dsn)
    safe_url = url.render_as_string(hide_password=True)

    try:
        engine = create_engine(url)
    except (SQLAlchemyError, ImportError) as e:
        raise DatabaseConnectionException(
            f"failed to connect: {e}", {"url": safe_url}
        ) from e

    try:
        with Session(engine) as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseConnectionException(
            f"failed to ping: {e}", {"url": safe_url}
        ) from e

    logger.info("Successfully connected to database", extra={"url": safe_url})
    return engine


def close_database(engine: Engine) -> None:
    """
    Dispose of the engine and its pooled connections.

    Raises:
        ReleaseException: If disposing fails
    """
    try:
        engine.dispose()
    except SQLAlchemyError as e:
        raise ReleaseException("Database", str(e)) from e
    logger.info("Database connection closed")
