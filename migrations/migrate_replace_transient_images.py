#!/usr/bin/env python3
"""
Migration script to replace expired image URLs on articles.
Rows written before the durable-upload guard may still point at temporary
image-generation storage; they are switched to the placeholder seeded by
their slug, which is what the API already serves for them.
"""

import os
import sys
from sqlalchemy import create_engine, text
from sqlalchemy.exc import ProgrammingError
from dotenv import load_dotenv

from journal.images.provenance import TRANSIENT_HOST_PATTERNS, fallback_image

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL")

if not DATABASE_URL:
    print("ERROR: DATABASE_URL environment variable is required.")
    sys.exit(1)

# Some providers hand out postgres:// but SQLAlchemy 2.0+ requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

engine = create_engine(DATABASE_URL)


def replace_transient_images():
    """Point every article with a temporary image URL at its fallback image."""
    with engine.begin() as connection:
        try:
            conditions = " OR ".join(f"image_url LIKE :pattern_{i}" for i in range(len(TRANSIENT_HOST_PATTERNS)))
            params = {f"pattern_{i}": f"%{p}%" for i, p in enumerate(TRANSIENT_HOST_PATTERNS)}
            rows = connection.execute(
                text(f"SELECT id, slug FROM articles WHERE {conditions}"), params
            ).fetchall()

            if not rows:
                print("✓ No articles with temporary image URLs.")
                return

            print(f"Replacing {len(rows)} temporary image URL(s)...")
            for article_id, slug in rows:
                connection.execute(
                    text("UPDATE articles SET image_url = :url WHERE id = :id"),
                    {"url": fallback_image(slug), "id": article_id}
                )
                print(f"  {slug}")
            print("✓ Temporary image URLs replaced.")

        except ProgrammingError as e:
            print(f"ERROR: Database error: {str(e)}")
            sys.exit(1)
        except Exception as e:
            print(f"ERROR: {str(e)}")
            sys.exit(1)


if __name__ == "__main__":
    print("Running migration to replace temporary image URLs...")
    print(f"Database: {DATABASE_URL.split('@')[-1] if '@' in DATABASE_URL else 'local'}")
    print()
    replace_transient_images()
    print()
    print("Migration completed successfully!")
