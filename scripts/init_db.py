"""Database initialisation.

Run with ``python scripts/init_db.py`` without touching ``PYTHONPATH``. Also
creates the ``data/`` folder so SQLite does not fail with "unable to open
database file", and stores the configured default target temperature if none
has been saved yet.
"""

import sys
from pathlib import Path

# Add the repository root to sys.path so "backend" imports work when the
# script is run directly.
sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend.core.config import CLIMATE, ensure_dirs
from backend.core.db import SessionLocal, Setting, init_db
from backend.core.store import TARGET_TEMPERATURE_KEY

ensure_dirs()
init_db()

with SessionLocal() as s:
    if not s.get(Setting, TARGET_TEMPERATURE_KEY):
        s.add(Setting(key=TARGET_TEMPERATURE_KEY, value=repr(float(CLIMATE["default_target_temp_c"]))))
        s.commit()

print("DB initialized")
