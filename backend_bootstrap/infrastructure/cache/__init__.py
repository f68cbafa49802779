"""
Redis client helpers.

Builds a client from the ``redis.*`` configuration keys and verifies it with
``PING`` before handing it back.
"""

from typing import Tuple

from redis import Redis
from redis.exceptions import RedisError

from backend_bootstrap.core import CacheConnectionException, ReleaseException
from backend_bootstrap.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6379


def parse_address(addr: str) -> Tuple[str, int]:
    """
    Split a ``host:port`` address.

    An empty address means ``localhost:6379`` and a missing port means 6379.
    IPv6 hosts may be bracketed (``[::1]:6379``).
    """
    addr = addr.strip()
    if not addr:
        return DEFAULT_HOST, DEFAULT_PORT

    if addr.startswith("["):
        host, _, rest = addr[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif addr.count(":") == 1:
        host, _, port_text = addr.partition(":")
    else:
        host, port_text = addr, ""

    try:
        port = int(port_text) if port_text else DEFAULT_PORT
    except ValueError as e:
        raise CacheConnectionException(f"invalid port in address '{addr}'") from e
    return host or DEFAULT_HOST, port


def connect_cache(addr: str, password: str, db: int) -> Redis:
    """
    Return a Redis client that answered ``PING``.

    Raises:
        CacheConnectionException: If the address is invalid or the ping fails
    """
    host, port = parse_address(addr)
    client = Redis(host=host, port=port, password=password or None, db=db)
    try:
        client.ping()
    except RedisError as e:
        try:
            client.close()
        except RedisError:
            logger.debug("Ignoring error while closing failed Redis client")
        raise CacheConnectionException(
            f"failed to connect: {e}", {"host": host, "port": port, "db": db}
        ) from e

    logger.info(
        "Successfully connected to Redis",
        extra={"host": host, "port": port, "db": db},
    )
    return client


def close_cache(client: Redis) -> None:
    """
    Close the Redis client and its connection pool.

    Raises:
        ReleaseException: If closing fails
    """
    try:
        client.close()
    except RedisError as e:
        raise ReleaseException("Redis", str(e)) from e
    logger.info("Redis connection closed")
