import csv
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from ..database.schema import Property
from ..utils.logging import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "t"}
_FALSE_VALUES = {"0", "false", "no", "n", "f"}


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a CSV flag; blank or unrecognized values are unknown (None)."""
    if value is None:
        return None
    text = value.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def load_properties_from_csv(csv_path: Path, session: Session) -> int:
    """
    Load properties from CSV and insert into database.

    Expected CSV columns: name, slug, address, owner, area, wifi, created_at
    (id is optional; rows without one are appended in file order). Rows
    without a name are skipped. A missing slug is derived from the name.
    """
    if not csv_path.exists():
        logger.warning(f"CSV file not found: {csv_path}")
        return 0

    loaded_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    count = 0
    with csv_path.open("r", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        for row in reader:
            name = (row.get("name") or "").strip()
            if not name:
                logger.debug(f"Skipping CSV row without a name: {row}")
                continue
            raw_id = (row.get("id") or "").strip()
            prop = Property(
                id=int(raw_id) if raw_id.isdigit() else None,
                name=name,
                slug=(row.get("slug") or "").strip() or _slugify(name),
                address=(row.get("address") or "").strip() or None,
                owner=(row.get("owner") or "").strip() or None,
                area=(row.get("area") or "").strip() or None,
                wifi=parse_bool(row.get("wifi")),
                created_at=(row.get("created_at") or "").strip() or loaded_at,
            )
            if prop.id is not None:
                session.merge(prop)  # Use merge so reloading a file updates rows
            else:
                session.add(prop)
            count += 1

    session.commit()
    logger.info(f"Loaded {count} properties from {csv_path}")
    return count
