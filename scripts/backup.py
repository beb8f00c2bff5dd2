"""Download a user's cloud copy (settings, subjects, timetable, attendance) to a JSON file.

Usage: python scripts/backup.py <uid>
"""

from __future__ import annotations

import asyncio
import importlib
import json
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.class_attendance.class_attendance.container import build_container, build_local_store, build_remote_store
from src.class_attendance.class_attendance.users.identity import InMemoryIdentity


async def _export(container, uid: str) -> dict:
    try:
        return await container.sync.export_all(uid)
    finally:
        await container.remote_store.close()


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("usage: python scripts/backup.py <uid>")
    uid = sys.argv[1]

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        local_store=build_local_store("memory"),
        remote_store=build_remote_store(
            getattr(settings, "REMOTE_STORE", "memory"),
            getattr(settings, "REMOTE_STORE_URL", None),
            getattr(settings, "REMOTE_STORE_TOKEN", None),
        ),
        identity=InMemoryIdentity(uid),
    )

    data = asyncio.run(_export(container, uid))

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"class_attendance_{uid}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    out_file.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
