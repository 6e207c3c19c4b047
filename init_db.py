#!/usr/bin/env python
"""Database initialization script for the Bookmaru backend.

This script creates all database tables based on the SQLAlchemy models.
Run this once before starting the application for the first time, or use
the Alembic migration in migrations/.

Usage:
    python init_db.py
"""

import os
import sys
from bookmaru import create_app, db


def init_database():
    """Initialize the database by creating all tables."""

    config_name = os.getenv('FLASK_ENV', 'development')
    app = create_app(config_name)

    print(f"\n{'='*60}")
    print(f"Database Initialization for {config_name.upper()} Environment")
    print(f"{'='*60}\n")

    with app.app_context():
        try:
            print("Creating database tables...")
            print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}\n")

            db.create_all()

            print("✅ Database tables created successfully!\n")
            print("Created tables:")
            print(f"  ✓ {'places':<25} - Reading spots and their moderation status")

            print(f"\n{'='*60}")
            print("Next steps:")
            print("  1. Start the Flask server: python wsgi.py")
            print("  2. Submit a place: POST /api/submit")
            print("\n")

            return True

        except Exception as e:
            print(f"❌ Error creating database: {e}\n")
            print(f"Traceback: {type(e).__name__}: {str(e)}")
            return False


if __name__ == '__main__':
    success = init_database()
    sys.exit(0 if success else 1)
