"""
Initialize database — creates the spot_jobs table.
Run once before first launch, or after changing the model.
Usage: python scripts/setup/init_db.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine
from app.config import settings
from sqlalchemy import inspect, text


def main():
    print("🗄️  Spot jobs DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {engine.url.render_as_string(hide_password=True)}")
    print(f"🔒 TLS: {'on' if settings.DB_SSL_ENABLED else 'off'} (PGSSLMODE={settings.PGSSLMODE})")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nCheck DATABASE_URL, and set PGSSLMODE=disable for a local Postgres without TLS.")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()

    columns = [c["name"] for c in inspect(engine).get_columns("spot_jobs")]
    print(f"✅ spot_jobs ready ({len(columns)} columns):")
    for name in columns:
        print(f"   ✓ {name}")

    print("\n🎉 Database ready! You can now start the receiver:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.PORT}")


if __name__ == "__main__":
    main()
