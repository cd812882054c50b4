"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresEventRepository,
    PostgresRegistrationRepository,
    PostgresVenueRepository,
    run_migrations,
)

__all__ = [
    "PostgresEventRepository",
    "PostgresRegistrationRepository",
    "PostgresVenueRepository",
    "run_migrations",
]
