#!/usr/bin/env python
"""Database initialization script for the errands backend.

Creates all tables from the SQLAlchemy models. Production databases
should use the Alembic migrations instead (python migrate_debug.py).

Usage:
    python init_db.py
"""

import os
import sys
from errands import create_app, db


def init_database():
    """Initialize the database by creating all tables."""
    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            print(f"❌ Error creating database: {type(e).__name__}: {e}\n")
            return False

        print("Created tables:")
        for table_name in db.metadata.tables:
            print(f"  ✓ {table_name}")
        print("\nNext step: python wsgi.py\n")
        return True


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
