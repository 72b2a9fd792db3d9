from progression.infrastructure.storage.gateway import (
    InMemoryGateway,
    PersistenceGateway,
    SafeGateway,
    SqlAlchemyGateway,
    ensure_safe,
)

__all__ = [
    "InMemoryGateway",
    "PersistenceGateway",
    "SafeGateway",
    "SqlAlchemyGateway",
    "ensure_safe",
]
