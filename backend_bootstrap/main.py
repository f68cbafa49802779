"""
Backend Bootstrap - Main Entry Point
====================================

Loads the configuration, then connects to each backend in order:

1. Database (SQLAlchemy)
2. Cache (Redis)
3. Broker (RabbitMQ)

Every acquired handle is released in reverse order when the sequence ends,
whether it ran through or stopped at a failing stage.
"""

import sys
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from pydantic import ValidationError

from backend_bootstrap.config import Configuration, get_settings, load_configuration
from backend_bootstrap.core import ApplicationException, ConfigurationException
from backend_bootstrap.infrastructure.broker import close_broker, connect_broker
from backend_bootstrap.infrastructure.cache import close_cache, connect_cache
from backend_bootstrap.infrastructure.database import close_database, connect_database
from backend_bootstrap.shared.infrastructure.logging import (
    get_logger,
    log_latency,
    setup_logging,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Stage:
    """A named connect/release pair run by the sequencer."""
    name: str
    connect: Callable[[Configuration], Any]
    release: Callable[[Any], None]


def _open_database(configuration: Configuration):
    return connect_database(configuration.get_string("database.dsn"))


def _open_cache(configuration: Configuration):
    return connect_cache(
        configuration.get_string("redis.addr", ""),
        configuration.get_string("redis.password", ""),
        configuration.get_int("redis.db", 0),
    )


def _open_broker(configuration: Configuration):
    return connect_broker(configuration.get_string("rabbitmq.url"))


def default_stages() -> List[Stage]:
    """Database, cache and broker stages, in acquisition order."""
    return [
        Stage("database", _open_database, close_database),
        Stage("cache", _open_cache, close_cache),
        Stage("broker", _open_broker, close_broker),
    ]


class BootstrapSequencer:
    """
    Runs stages strictly in order and owns every handle they return.

    The first failing stage stops the sequence. Handles acquired before the
    failure are still released, newest first.
    """

    def __init__(self, configuration: Configuration, stages: Optional[Sequence[Stage]] = None):
        self._configuration = configuration
        self._stages = list(stages) if stages is not None else default_stages()

    def run(self) -> List[str]:
        """
        Connect every stage, then release them all.

        Returns:
            List[str]: Names of the stages that were acquired, in order

        Raises:
            ApplicationException: From the first failing connect or release.
                ``details["stage"]`` names the stage.
        """
        acquired: List[str] = []
        with ExitStack() as stack:
            for stage in self._stages:
                try:
                    with log_latency(logger, f"{stage.name} connect", stage=stage.name):
                        handle = stage.connect(self._configuration)
                except ApplicationException as e:
                    e.details.setdefault("stage", stage.name)
                    raise
                stack.push(self._releaser(stage, handle))
                acquired.append(stage.name)

            logger.info("All backends connected", extra={"stages": acquired})
        return acquired

    @staticmethod
    def _releaser(stage: Stage, handle: Any) -> Callable[..., bool]:
        """
        Build the exit callback that releases one handle.

        When an earlier failure is already propagating, a release failure is
        logged and the earlier failure keeps propagating.
        """

        def _exit(exc_type, exc, tb) -> bool:
            try:
                stage.release(handle)
            except ApplicationException as e:
                e.details.setdefault("stage", stage.name)
                if exc is None:
                    raise
                logger.error(
                    f"failed to release {stage.name} after earlier failure: {e.message}",
                    extra={"stage": stage.name, "error_type": type(e).__name__},
                )
            return False

        return _exit


def main() -> int:
    """Process entry point. Returns the exit status."""
    try:
        settings = get_settings()
    except ValidationError as e:
        setup_logging()
        logger.critical(f"fatal error process settings: {e}", extra={"stage": "config"})
        return 1
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting bootstrap", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    try:
        configuration = load_configuration(
            settings.config_name, settings.config_paths, settings.config_type
        )
    except ConfigurationException as e:
        logger.critical(f"fatal error config file: {e.message}", extra={"stage": "config"})
        return 1

    try:
        BootstrapSequencer(configuration).run()
    except ApplicationException as e:
        stage = e.details.get("stage", "unknown")
        logger.critical(
            f"bootstrap failed at {stage} stage: {e.message}",
            extra={"stage": stage, "error_type": type(e).__name__},
        )
        return 1

    logger.info("Bootstrap complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
