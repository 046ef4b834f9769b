"""
Database initialization script.

Run this script to create database tables. Production schemas should be
managed with ``alembic upgrade head`` instead.

Usage:
    python scripts/init_db.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from taskflow.core.config import get_settings
from taskflow.core.logging_setup import configure_logging
from taskflow.db.init_db import init_db
from taskflow.db.session import create_db_engine

if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    print("=" * 50)
    print("TaskFlow Database Initialization")
    print("=" * 50)
    print()

    try:
        init_db(create_db_engine(settings))
        print()
        print("=" * 50)
        print("SUCCESS: Database initialized!")
        print("=" * 50)
        sys.exit(0)

    except Exception as e:
        print()
        print("=" * 50)
        print("ERROR: Database initialization failed!")
        print(f"Details: {e}")
        print("=" * 50)
        sys.exit(1)
