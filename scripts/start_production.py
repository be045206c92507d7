#!/usr/bin/env python3
"""Serve the observation sync API with uvicorn.

Checks that the session store opens and the Chroma directory is writable
before binding, so a misconfigured deployment fails at launch instead of on
the first sync request.
"""

import argparse
import os
import sys
import uvicorn
from pathlib import Path

# Add the parent directory to the path
sys.path.append(str(Path(__file__).parent.parent))

from memsync.config import settings
from memsync.logging import logger
from memsync.session_store import SessionStore

def preflight(db_path: str) -> bool:
    """Open the session store and prepare the Chroma directory."""
    try:
        store = SessionStore(db_path)
        logger.info(f"Session store ready: {store.count_observations()} observations in {db_path}")
    except Exception as e:
        logger.error(f"❌ Cannot open session store at {db_path}: {e}")
        return False

    if settings.IS_EPHEMERAL_CHROMA:
        logger.warning("⚠️  IS_EPHEMERAL_CHROMA set - the index is lost on restart")
        return True

    try:
        os.makedirs(settings.CHROMADB_PATH, exist_ok=True)
    except OSError as e:
        logger.error(f"❌ Cannot create ChromaDB directory {settings.CHROMADB_PATH}: {e}")
        return False
    if not os.access(settings.CHROMADB_PATH, os.W_OK):
        logger.error(f"❌ ChromaDB directory {settings.CHROMADB_PATH} is not writable")
        return False
    return True

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Start the memsync API server")
    parser.add_argument("--host", default=settings.API_HOST)
    parser.add_argument("--port", type=int, default=settings.API_PORT)
    parser.add_argument("--workers", type=int, default=settings.API_WORKERS)
    parser.add_argument("--skip-preflight", action="store_true", help="Start without checking storage")
    args = parser.parse_args(argv)

    if not settings.OPENAI_API_KEY:
        logger.warning("⚠️  OPENAI_API_KEY not set - observations will use fallback embeddings")

    if not args.skip_preflight and not preflight(settings.SQLITE_DB_PATH):
        return 1

    logger.info(f"🚀 memsync listening on {args.host}:{args.port} ({args.workers} workers), "
                f"collection '{settings.CHROMADB_COLLECTION}'")

    uvicorn.run(
        "memsync.main:app",
        host=args.host,
        port=args.port,
        workers=args.workers,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0

if __name__ == "__main__":
    sys.exit(main())
