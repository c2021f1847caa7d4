"""
Create the intelligence store schema (tables, indexes, project_dashboard view).

Usage:
    python scripts/init_db.py [--database-uri sqlite:///./data/intelligence.db]
"""

import argparse
from pathlib import Path
import sys

# Ensure project root is on sys.path when run as a script
current_dir = Path(__file__).resolve().parent
project_root = current_dir.parent

if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from adapters.sql_intelligence_store import SqlIntelligenceStoreAdapter  # noqa: E402
from shared_utils.config_loader import get_settings  # noqa: E402
from shared_utils.error_handler import StorageError  # noqa: E402


def init_db(database_uri: str) -> int:
    store = SqlIntelligenceStoreAdapter(database_uri=database_uri)
    try:
        store.create_schema()
    except StorageError as e:
        print(f"Schema creation failed: {e.message}", file=sys.stderr)
        return 1
    print(f"Schema ready at {database_uri}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--database-uri", default=None, help="SQLAlchemy database URL")
    args = parser.parse_args()
    sys.exit(init_db(args.database_uri or get_settings().database_uri))
