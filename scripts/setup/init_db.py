# scripts/setup/init_db.py
"""
Initialize database: creates all tables and optionally loads the demo fleet.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--seed]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from fleetcheck.database import create_tables, engine, SessionLocal
from fleetcheck.config import settings
from fleetcheck.services.seed_service import seed_demo_data, DEMO_PASSWORD
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create FleetCheck tables")
    parser.add_argument("--seed", action="store_true", help="Load sample vehicles, damages and demo accounts")
    args = parser.parse_args()

    print("🗄️  FleetCheck DB Initialization")
    print("=" * 40)
    if not settings.IS_CONFIGURED:
        print("⚠️  DATABASE_URL / API_KEY not set — this only touches the in-memory demo database")
        print("   Set both in .env to initialize a real database.")
    else:
        print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"✅ Tables ready ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        db = SessionLocal()
        try:
            if seed_demo_data(db):
                print(f"\n🌱 Demo data loaded — sign in as 'supervisor' or 'driver' / '{DEMO_PASSWORD}'")
            else:
                print("\n🌱 Database already has data, seed skipped")
        finally:
            db.close()

    print("\n🎉 Database ready! You can now start the backend:")
    print("   uvicorn fleetcheck.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
