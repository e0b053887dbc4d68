from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

from app.scripts.seed_db import main as run_seed

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def alembic_config(ini_path: Path | None = None) -> Config:
    cfg = Config(str(ini_path or PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


def run(*, revision: str = "head", seed: bool = True) -> None:
    print("Running database migrations...")
    command.upgrade(alembic_config(), revision)
    if seed:
        print("Running seed...")
        run_seed()
    print("All database operations completed successfully")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Apply migrations and seed default data.")
    parser.add_argument("--revision", default="head")
    parser.add_argument("--skip-seed", action="store_true")
    args = parser.parse_args(argv)
    try:
        run(revision=args.revision, seed=not args.skip_seed)
    except Exception:
        logger.exception("Error running database operations")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
