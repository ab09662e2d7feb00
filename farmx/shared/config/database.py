# 📄 File: farmx/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# The common blueprint every database table in the farm app is built from,
# so tables, keys and timestamps are named the same way everywhere.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy declarative base with a constraint naming convention shared by all
# module ORM models, plus timezone-aware timestamp helpers.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM (DeclarativeBase, MetaData)
#
# 🔄 Connected Modules / Calls From:
# - All module infrastructure/database/models.py files
# - migrations/env.py (autogenerate target metadata)
# - tests/conftest.py (create_all / drop_all)

from datetime import datetime, timezone

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase


# =============================================================================
# DATABASE MODELS BASE CLASS
# =============================================================================

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class DatabaseBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides shared metadata configuration for every table in the
    FarmX application.
    """
    metadata = metadata


def utcnow() -> datetime:
    """Timezone-aware current time used for column defaults."""
    return datetime.now(timezone.utc)
