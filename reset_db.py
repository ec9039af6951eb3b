"""Database reset script for development.

Drops every tracking table (samples, alerts, completion codes, settings)
and recreates them from the models. USE ONLY IN DEVELOPMENT.

Usage:
    python reset_db.py          # asks for confirmation
    python reset_db.py --yes    # no prompt
"""

import os
import sys

if os.getenv('FLASK_ENV') == 'production':
    print("Refusing to reset a production database.")
    sys.exit(1)

if '--yes' not in sys.argv:
    print("="*60)
    print("WARNING: This will DELETE ALL tasks, location trails and codes!")
    print("="*60)
    confirm = input("Type 'yes' to confirm: ")
    if confirm.lower() != 'yes':
        print("Aborted.")
        sys.exit(0)

from errands import create_app, db  # noqa: E402

app = create_app()

with app.app_context():
    print("\nDropping all tables...")
    db.drop_all()

    print("Creating all tables with current schema...")
    db.create_all()
    for table_name in db.metadata.tables:
        print(f"  ✓ {table_name}")

    print("\nDatabase reset complete! Start the server with: python wsgi.py")
