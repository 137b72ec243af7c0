"""Backend registry: pick a gateway and number generator from a URL."""

from fleetcontract.exceptions import GatewayError
from fleetcontract.gateway.base import IdentifierGenerator, PersistenceGateway

MEMORY_URL = "memory://"


def open_backend(url: str, create_schema: bool = False) -> tuple[PersistenceGateway, IdentifierGenerator]:
    """Open the gateway and number generator for a database URL.

    Lazy import so the in-memory backend works without a database driver.

    Args:
        url: ``memory://`` or any SQLAlchemy URL
        create_schema: Create missing tables (SQL backends only)

    Returns:
        (gateway, generator) pair sharing the same store

    Raises:
        ValueError: If the URL is empty
        GatewayError: If the URL is invalid or the database cannot be reached
    """
    if not url:
        raise ValueError("No database URL configured")

    if url == MEMORY_URL:
        from fleetcontract.gateway.memory import InMemoryGateway, InMemoryNumberGenerator

        return InMemoryGateway(), InMemoryNumberGenerator()

    from fleetcontract.gateway.sql import SqlGateway, SqlNumberGenerator

    gateway = SqlGateway(url)
    if create_schema:
        try:
            gateway.create_schema()
        except GatewayError:
            gateway.engine.dispose()
            raise
    return gateway, SqlNumberGenerator(gateway)
