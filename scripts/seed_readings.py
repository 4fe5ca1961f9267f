"""Seed the temperature log with random readings for the last day.

Readings from the covered period are removed first, then one reading every
``--step`` minutes is inserted, within ±10% of ``--office``.

    python scripts/seed_readings.py --office 21 [--hours 24] [--step 10]
"""

import argparse
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from backend.core.config import ensure_dirs
from backend.core.db import SessionLocal, TemperatureLog, init_db


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--office", type=float, required=True, help="centre temperature in °C")
    parser.add_argument("--hours", type=int, default=24)
    parser.add_argument("--step", type=int, default=10, help="minutes between readings")
    args = parser.parse_args(argv)
    if args.step <= 0 or args.hours <= 0:
        parser.error("--hours and --step must be positive")
    return args


def main(argv=None):
    args = parse_args(argv)
    ensure_dirs()
    init_db()

    now = datetime.utcnow()
    since = now - timedelta(hours=args.hours)
    spread = abs(args.office) * 0.1

    with SessionLocal() as s:
        removed = s.query(TemperatureLog).filter(TemperatureLog.ts >= since).delete(synchronize_session=False)
        ts = since
        count = 0
        while ts <= now:
            value = round(random.uniform(args.office - spread, args.office + spread), 2)
            s.add(TemperatureLog(ts=ts, temperature=value))
            ts += timedelta(minutes=args.step)
            count += 1
        s.commit()

    print(f"Removed {removed} reading(s), inserted {count}")


if __name__ == "__main__":
    main()
