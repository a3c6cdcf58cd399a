"""Seed a development database with the Conduit sample data.

Usage:
    python scripts/seed_dev_data.py

Reads DATABASE_URL (and the SEED_* options) from the environment or
backend/.env. Exits with status 1 if any step fails.
"""

from __future__ import annotations

import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Bootstrap: add backend/ to sys.path so `conduit.*` imports work without an
# installed package.
# ---------------------------------------------------------------------------
BACKEND_DIR = Path(__file__).resolve().parent.parent / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from conduit.db.seed import main  # noqa: E402

if __name__ == "__main__":
    main()
