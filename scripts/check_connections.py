#!/usr/bin/env python3
"""
Connection Check Script

Verifies the configured database is reachable and the schema can be created.
Usage: python scripts/check_connections.py
"""
import sys

from jobboard.core.config import get_settings
from jobboard.core.logging import configure_logging
from jobboard.db.database import check_database_connection, engine, init_db


def main() -> int:
    configure_logging()
    settings = get_settings()
    print("=" * 50)
    print("JOB BOARD - CONNECTION CHECK")
    print("=" * 50)

    print(f"\n[1] Database ({engine.dialect.name})...")
    if settings.database_url:
        print(f"    URL: {engine.url.render_as_string(hide_password=True)}")
    else:
        print(
            f"    URL: postgresql://{settings.postgres_user}:****@"
            f"{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}"
        )
    if not check_database_connection():
        print("    FAILED")
        return 1
    print("    CONNECTED")

    print("\n[2] Schema...")
    init_db()
    print("    READY")

    print("\n[3] Outbound email...")
    if settings.resend_api_key:
        print(f"    Resend configured, sender {settings.email_from}")
    else:
        print("    RESEND_API_KEY not set, verification emails will be logged only")

    print("\n" + "=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
