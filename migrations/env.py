# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Configuration file that tells Alembic how to connect to the database and
# run migrations safely, in development and in production.
# 🧪 Purpose (Technical Summary):
# Alembic environment configuration: async engine from farmx settings, imports every
# module's models so autogenerate sees the full FarmX metadata.
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy (ORM, async engine)
# - python-dotenv (environment variables)
# - farmx.shared.config.settings
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)
# - Development and production deployment

import asyncio
import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

# Load environment variables
load_dotenv()

# Add the project root to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from farmx.shared.config.database import DatabaseBase  # noqa: E402
from farmx.shared.config.settings import get_settings  # noqa: E402

# Import all module models to ensure they're included in autogenerate
from farmx.modules.user_management.infrastructure.database.models import UserModel  # noqa: E402,F401
from farmx.modules.storefront.infrastructure.database.models import (  # noqa: E402,F401
    OrderItemModel,
    OrderModel,
    ProductModel,
)
from farmx.modules.subscriptions.infrastructure.database.models import (  # noqa: E402,F401
    SubscriptionModel,
    SubscriptionPaymentModel,
)
from farmx.modules.analytics.infrastructure.database.models import (  # noqa: E402,F401
    FarmModel,
    PondModel,
    ScanResultModel,
)

# This is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set the target metadata for 'autogenerate' support
target_metadata = DatabaseBase.metadata


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits SQL to the script output without a live connection.
    """
    context.configure(
        url=get_settings().database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    settings = get_settings()
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=settings.is_sqlite,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations through the same async driver the application uses.
    """
    connectable = create_async_engine(get_settings().database_url, poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


# Determine which mode to run migrations in
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
