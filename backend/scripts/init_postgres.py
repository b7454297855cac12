"""
Check the PostgreSQL database for the Movie Tracker API.
Run once before applying migrations: python scripts/init_postgres.py

Requires: PostgreSQL installed and running. Create user and database:

  sudo -u postgres psql
  CREATE USER movietracker WITH PASSWORD 'movietracker';
  CREATE DATABASE movietracker_db OWNER movietracker;
  GRANT ALL PRIVILEGES ON DATABASE movietracker_db TO movietracker;
  \q
"""

import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import create_engine, text
from app.config import settings


def main():
    url = settings.get_database_url()
    if not url.startswith("postgresql"):
        print("Database URL is not PostgreSQL. Skipping.")
        return
    try:
        engine = create_engine(url)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print(f"PostgreSQL connection OK. Database {settings.POSTGRES_DB} exists.")
    except Exception as e:
        print(f"Cannot connect to PostgreSQL: {e}")
        print("\nCreate database first:")
        print("  psql -U postgres -c \"CREATE USER movietracker WITH PASSWORD 'movietracker';\"")
        print("  psql -U postgres -c \"CREATE DATABASE movietracker_db OWNER movietracker;\"")
        print("  psql -U postgres -c \"GRANT ALL PRIVILEGES ON DATABASE movietracker_db TO movietracker;\"")
        sys.exit(1)


if __name__ == "__main__":
    main()
