"""Base Model Module."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Index and constraint names must match the ones created by the Alembic migrations
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all database models."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    def __repr__(self) -> str:
        """Show the primary key, which is enough to identify a row in logs."""
        return f"<{self.__class__.__name__} id={getattr(self, 'id', None)!r}>"
