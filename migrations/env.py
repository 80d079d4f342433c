import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from bloodcamp.app import create_app, db
from bloodcamp import models  # noqa: F401  registers blood_donations on db.metadata

config = context.config

fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

app = create_app()
target_metadata = db.metadata


def _database_url() -> str:
    # `alembic -x db_url=...` beats alembic.ini, which beats the app config
    x_args = context.get_x_argument(as_dictionary=True)
    return (
        x_args.get("db_url")
        or config.get_main_option("sqlalchemy.url")
        or app.config["SQLALCHEMY_DATABASE_URI"]
    )


def run_migrations_offline() -> None:
    url = _database_url()
    logger.info("Generating SQL for %s", url.split("@")[-1])
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _database_url()
    with app.app_context():
        if url == app.config["SQLALCHEMY_DATABASE_URI"]:
            connectable = db.engine
        else:
            connectable = create_engine(url)
        with connectable.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
                render_as_batch=connection.dialect.name == "sqlite",
            )
            with context.begin_transaction():
                context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
