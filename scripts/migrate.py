"""Script to run database migrations.

Usage:
    python scripts/migrate.py                 # upgrade to head
    python scripts/migrate.py downgrade 003   # downgrade to a revision
    python scripts/migrate.py create "add column"
"""

import sys

from alembic import command
from alembic.config import Config


def run_migrations(revision: str = "head") -> None:
    """Upgrade the database to a revision."""
    alembic_cfg = Config("alembic.ini")

    try:
        print(f"Upgrading database to {revision}...")
        command.upgrade(alembic_cfg, revision)
        print("✓ Migrations completed successfully!")
    except Exception as e:
        print(f"✗ Migration failed: {e}", file=sys.stderr)
        sys.exit(1)


def downgrade(revision: str) -> None:
    """Downgrade the database to a revision."""
    alembic_cfg = Config("alembic.ini")

    try:
        print(f"Downgrading database to {revision}...")
        command.downgrade(alembic_cfg, revision)
        print("✓ Downgrade completed successfully!")
    except Exception as e:
        print(f"✗ Downgrade failed: {e}", file=sys.stderr)
        sys.exit(1)


def create_migration(message: str) -> None:
    """Create an empty migration; schema changes are written by hand."""
    alembic_cfg = Config("alembic.ini")

    try:
        print(f"Creating migration: {message}")
        command.revision(alembic_cfg, message=message)
        print("✓ Migration created successfully!")
    except Exception as e:
        print(f"✗ Migration creation failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) == 1:
        run_migrations()
    elif sys.argv[1] == "create" and len(sys.argv) > 2:
        create_migration(" ".join(sys.argv[2:]))
    elif sys.argv[1] == "downgrade" and len(sys.argv) == 3:
        downgrade(sys.argv[2])
    else:
        print('Usage: python scripts/migrate.py [downgrade <revision> | create "<message>"]')
        sys.exit(2)
