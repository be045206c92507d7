#!/usr/bin/env python3
"""Force specific observations into the search index from the command line."""

import argparse
import json
import sys
import os

# Add the parent directory to the path so we can import memsync modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from memsync.chroma_sync import ChromaSync
from memsync.config import settings
from memsync.session_store import SessionStore
from memsync.sync_service import SyncService

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Sync observations by id into Chroma")
    parser.add_argument("ids", nargs="+", type=int, help="Observation ids to sync")
    parser.add_argument("--db", default=settings.SQLITE_DB_PATH, help="SQLite database path")
    parser.add_argument("--collection", default=settings.CHROMADB_COLLECTION, help="Chroma collection name")
    args = parser.parse_args(argv)
    
    service = SyncService(SessionStore(args.db), ChromaSync(collection_name=args.collection))
    result = service.sync_observations(args.ids)
    
    print(json.dumps(result.to_response(), indent=2))
    return 0 if result.success else 1

if __name__ == "__main__":
    sys.exit(main())
