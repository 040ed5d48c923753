# app/utils/csv_loader.py
from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
import logging

from sqlalchemy.orm import Session
from sqlalchemy import select

from app.models.entities import Achievement

log = logging.getLogger(__name__)


def _get_first_present(row: dict, *keys: str, default=None):
    """Return row[key] for the first present key (case-sensitive), else default."""
    for k in keys:
        if k in row and row[k] not in (None, ""):
            return row[k]
    return default


def _safe_int(v, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        try:
            # Sometimes numeric strings come as floats like "29.0"
            return int(float(v))
        except (TypeError, ValueError):
            return default


@dataclass
class _DetectedDialect:
    delimiter: str = ","


def _detect_dialect(sample: str) -> _DetectedDialect:
    lines = sample.splitlines()
    # Prefer tab if tabs exist in the first line (common for spreadsheets copied as TSV)
    if lines and "\t" in lines[0]:
        return _DetectedDialect(delimiter="\t")
    try:
        sniffer = csv.Sniffer()
        dialect = sniffer.sniff(sample, delimiters=",\t;|")
        return _DetectedDialect(delimiter=dialect.delimiter)
    except csv.Error:
        return _DetectedDialect()


def _read_rows(csv_path: Path) -> list[dict]:
    with csv_path.open("r", newline="", encoding="utf-8") as f:
        head = f.read(4096)
        f.seek(0)
        dialect = _detect_dialect(head)
        reader = csv.DictReader(f, delimiter=dialect.delimiter)
        return list(reader)


def bootstrap_achievements_from_csv(db: Session, csv_path: Path) -> int:
    """
    Idempotent loader for the achievement catalog. Rows whose id already
    exists are left untouched; returns the number of rows inserted.

    Columns (case-sensitive, either spelling):
      - id or key        (e.g. ach-expert; generated when missing)
      - title or Title
      - description
      - xp or XP         (reward, must be > 0)
      - icon             (defaults to "award")

    Delimiter is auto-detected (CSV/TSV/semicolon).
    """
    if not csv_path.exists():
        log.warning("[Seed] achievement catalog %s not found", csv_path)
        return 0

    rows = _read_rows(csv_path)
    inserted = 0
    seen: set[str] = set()
    for r in rows:
        title = str(_get_first_present(r, "title", "Title", default="")).strip()
        xp = _safe_int(_get_first_present(r, "xp", "XP"), default=0)
        if not title or xp <= 0:
            continue

        ach_id = str(_get_first_present(r, "id", "key", default="")).strip()
        if ach_id:
            if ach_id in seen or db.scalar(select(Achievement).where(Achievement.id == ach_id)):
                continue
            seen.add(ach_id)

        fields = {
            "title": title,
            "description": str(_get_first_present(r, "description", default="")).strip(),
            "xp": xp,
            "icon": str(_get_first_present(r, "icon", default="award")).strip(),
        }
        if ach_id:
            fields["id"] = ach_id
        db.add(Achievement(**fields))
        inserted += 1

    db.commit()
    log.info("[Seed] %d achievements loaded from %s", inserted, csv_path.name)
    return inserted
