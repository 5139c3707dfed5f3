#!/usr/bin/env python3
"""
Migration script to enforce unique article slugs.
Existing duplicates are renamed with a numeric suffix (oldest row keeps the
plain slug) before the unique index is created.
"""

import os
import sys
from sqlalchemy import create_engine, text
from sqlalchemy.exc import ProgrammingError
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.environ.get("DATABASE_URL")

if not DATABASE_URL:
    print("ERROR: DATABASE_URL environment variable is required.")
    sys.exit(1)

# Some providers hand out postgres:// but SQLAlchemy 2.0+ requires postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

engine = create_engine(DATABASE_URL)

INDEX_NAME = "ux_articles_slug"


def check_index_exists(connection, index_name):
    """Check if an index exists."""
    result = connection.execute(
        text("SELECT indexname FROM pg_indexes WHERE indexname = :index_name"),
        {"index_name": index_name}
    )
    return result.fetchone() is not None


def next_free_slug(base, taken):
    suffix = 1
    while f"{base}-{suffix}" in taken:
        suffix += 1
    return f"{base}-{suffix}"


def rename_duplicates(connection):
    """Give every duplicate slug except the oldest a -N suffix. Returns the number renamed."""
    rows = connection.execute(text("""
        SELECT id, slug FROM articles
        WHERE slug IN (SELECT slug FROM articles GROUP BY slug HAVING COUNT(*) > 1)
        ORDER BY slug, created_at
    """)).fetchall()
    if not rows:
        return 0

    taken = {row[0] for row in connection.execute(text("SELECT slug FROM articles"))}
    renamed = 0
    seen = set()
    for article_id, slug in rows:
        if slug not in seen:
            seen.add(slug)
            continue
        new_slug = next_free_slug(slug, taken)
        taken.add(new_slug)
        connection.execute(
            text("UPDATE articles SET slug = :slug WHERE id = :id"),
            {"slug": new_slug, "id": article_id}
        )
        print(f"  {slug} -> {new_slug}")
        renamed += 1
    return renamed


def add_unique_slug_index():
    """Rename duplicate slugs and create the unique index if it doesn't exist."""
    with engine.begin() as connection:
        try:
            if check_index_exists(connection, INDEX_NAME):
                print(f"✓ Index '{INDEX_NAME}' already exists.")
                return

            print("Renaming duplicate slugs...")
            renamed = rename_duplicates(connection)
            print(f"✓ Renamed {renamed} duplicate slug(s).")

            print(f"Creating unique index '{INDEX_NAME}' on 'articles.slug'...")
            connection.execute(text(f"CREATE UNIQUE INDEX {INDEX_NAME} ON articles(slug)"))
            print("✓ Unique index created.")

        except ProgrammingError as e:
            print(f"ERROR: Database error: {str(e)}")
            sys.exit(1)
        except Exception as e:
            print(f"ERROR: {str(e)}")
            sys.exit(1)


if __name__ == "__main__":
    print("Running migration to enforce unique article slugs...")
    print(f"Database: {DATABASE_URL.split('@')[-1] if '@' in DATABASE_URL else 'local'}")
    print()
    add_unique_slug_index()
    print()
    print("Migration completed successfully!")
