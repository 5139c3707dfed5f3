#!/usr/bin/env python3
"""
Migration script to create the popup_configs and popup_leads tables.
"""

import os
import sys
from sqlalchemy import create_engine, text, inspect
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


def create_popup_tables():
    """Create popup tables and indexes if they don't exist."""
    inspector = inspect(engine)
    existing_tables = inspector.get_table_names()

    with engine.begin() as connection:
        try:
            if "popup_configs" not in existing_tables:
                print("Creating 'popup_configs' table...")
                connection.execute(text("""
                    CREATE TABLE popup_configs (
                        id VARCHAR PRIMARY KEY,
                        name VARCHAR NOT NULL,
                        title VARCHAR NOT NULL,
                        description TEXT NOT NULL DEFAULT '',
                        image_url VARCHAR NOT NULL DEFAULT '',
                        image_caption VARCHAR NOT NULL DEFAULT '',
                        pdf_url VARCHAR NOT NULL,
                        pdf_title VARCHAR NOT NULL,
                        button_text VARCHAR NOT NULL DEFAULT 'Get Download Link',
                        delay_seconds INTEGER NOT NULL DEFAULT 10,
                        active BOOLEAN NOT NULL DEFAULT FALSE,
                        created_at TIMESTAMP NOT NULL DEFAULT NOW(),
                        updated_at TIMESTAMP NOT NULL DEFAULT NOW()
                    )
                """))
                connection.execute(text(
                    "CREATE INDEX IF NOT EXISTS ix_popup_configs_active ON popup_configs(active)"
                ))
                print("✓ Table 'popup_configs' created.")
            else:
                print("✓ Table 'popup_configs' already exists.")

            if "popup_leads" not in existing_tables:
                print("Creating 'popup_leads' table...")
                connection.execute(text("""
                    CREATE TABLE popup_leads (
                        id VARCHAR PRIMARY KEY,
                        popup_config_id VARCHAR NOT NULL REFERENCES popup_configs(id) ON DELETE CASCADE,
                        email VARCHAR NOT NULL,
                        ip_address VARCHAR,
                        user_agent VARCHAR NOT NULL DEFAULT '',
                        status VARCHAR NOT NULL DEFAULT 'active',
                        created_at TIMESTAMP NOT NULL DEFAULT NOW()
                    )
                """))
                print("Creating indexes on 'popup_leads'...")
                connection.execute(text(
                    "CREATE INDEX IF NOT EXISTS ix_popup_leads_popup_config_id ON popup_leads(popup_config_id)"
                ))
                connection.execute(text(
                    "CREATE INDEX IF NOT EXISTS ix_popup_leads_email ON popup_leads(email)"
                ))
                connection.execute(text(
                    "CREATE INDEX IF NOT EXISTS idx_popup_leads_popup_email_created "
                    "ON popup_leads(popup_config_id, email, created_at)"
                ))
                print("✓ Table 'popup_leads' created.")
            else:
                print("✓ Table 'popup_leads' already exists.")

        except ProgrammingError as e:
            print(f"ERROR: Database error: {str(e)}")
            sys.exit(1)
        except Exception as e:
            print(f"ERROR: {str(e)}")
            sys.exit(1)


if __name__ == "__main__":
    print("Running migration to create popup tables...")
    print(f"Database: {DATABASE_URL.split('@')[-1] if '@' in DATABASE_URL else 'local'}")
    print()
    create_popup_tables()
    print()
    print("Migration completed successfully!")
