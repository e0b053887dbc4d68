from __future__ import annotations

from app.db.session import SessionLocal
from app.services.seed import seed_defaults


def main() -> None:
    db = SessionLocal()
    try:
        summary = seed_defaults(db)
    finally:
        db.close()
    print(
        "seed done: "
        f"roles_created={summary.roles_created}, "
        f"users_created={summary.users_created}, "
        f"settings_created={summary.settings_created}"
    )


if __name__ == "__main__":
    main()
