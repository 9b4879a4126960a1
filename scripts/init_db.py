from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.timeclock_payroll.timeclock_payroll.database.bootstrap import apply_schema, ensure_default_rates, list_tables
from src.timeclock_payroll.timeclock_payroll.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    seeded = ensure_default_rates(db_config)
    tables = list_tables(db_config)
    print(
        f"OK: Applied schema.sql -> {DBConfig.from_mapping(db_config).describe()} "
        f"(tables={len(tables)}, default rates {'seeded' if seeded else 'already present'})"
    )


if __name__ == "__main__":
    main()
