#!/usr/bin/env python3
"""
Database migration helper for the poker club ledger.

Usage:
    python migrate.py create "description of changes"  # Autogenerate a new migration
    python migrate.py upgrade                          # Apply all pending migrations
    python migrate.py downgrade                        # Roll back one migration
    python migrate.py current                          # Show the database revision
    python migrate.py history                          # Show migration history
    python migrate.py stamp <revision>                 # Mark the database as being at a revision
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from alembic import command  # noqa: E402

from pokerclub.core.migrations import get_alembic_config, get_current_revision, stamp_database  # noqa: E402


def _needs_arg(argv: list[str], usage: str) -> str:
    if len(argv) < 3:
        print(f"Error: missing argument\nUsage: {usage}")
        sys.exit(1)
    return argv[2]


def main(argv: list[str]) -> None:
    if len(argv) < 2:
        print(__doc__)
        sys.exit(1)

    cmd = argv[1].lower()
    cfg = get_alembic_config()

    if cmd == "create":
        message = _needs_arg(argv, 'python migrate.py create "description of changes"')
        command.revision(cfg, message=message, autogenerate=True)
        print("Migration created; review it in alembic/versions/ before upgrading.")
    elif cmd == "upgrade":
        command.upgrade(cfg, "head")
        print("Migrations applied.")
    elif cmd == "downgrade":
        command.downgrade(cfg, "-1")
        print("Rolled back one migration.")
    elif cmd == "current":
        print(f"Current revision: {get_current_revision() or '(none)'}")
    elif cmd == "history":
        command.history(cfg)
    elif cmd == "stamp":
        stamp_database(_needs_arg(argv, "python migrate.py stamp <revision>"))
        print("Database stamped.")
    else:
        print(f"Error: Unknown command '{cmd}'")
        print(__doc__)
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv)
