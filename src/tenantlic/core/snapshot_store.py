# src/tenantlic/core/snapshot_store.py
from __future__ import annotations
import csv, os, stat, sys, pathlib, tempfile
from typing import Iterable, List, Optional

from tenantlic.core.catalog import split_plans
from tenantlic.core.errors import SnapshotReadError, SnapshotWriteError
from tenantlic.core.models import SkuCatalogEntry

APP_NAME = "tenantlic"
SNAPSHOT_FILE = "license_catalog.csv"

# Column order is part of the file format
COLUMNS = ("SkuPartNumber", "ServicePlans", "ServicePlanCount")


def _base_dir() -> pathlib.Path:
    if sys.platform.startswith("win"):
        root = os.environ.get("APPDATA") or os.path.expanduser("~\\AppData\\Roaming")
        return pathlib.Path(root) / APP_NAME
    elif sys.platform == "darwin":
        return pathlib.Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        return pathlib.Path.home() / ".local" / "share" / APP_NAME


def default_snapshot_path(tenant_id: str) -> pathlib.Path:
    return _base_dir() / "data" / "snapshots" / (tenant_id or "default") / SNAPSHOT_FILE


def read_snapshot(path: os.PathLike | str) -> Optional[List[SkuCatalogEntry]]:
    """None if there is no snapshot yet; SnapshotReadError if it cannot be trusted."""
    p = pathlib.Path(path)
    if not p.exists():
        return None
    try:
        with p.open("r", encoding="utf-8-sig", newline="") as fh:
            reader = csv.reader(fh)
            header = next(reader, None)
            if header is None or tuple(h.strip() for h in header) != COLUMNS:
                raise SnapshotReadError(f"{p}: expected columns {', '.join(COLUMNS)}, got {header}")
            return [_parse_row(p, reader.line_num, row) for row in reader if any(row)]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise SnapshotReadError(f"{p}: {e}") from e


def _parse_row(p: pathlib.Path, line: int, row: List[str]) -> SkuCatalogEntry:
    if len(row) != len(COLUMNS):
        raise SnapshotReadError(f"{p}:{line}: expected {len(COLUMNS)} fields, got {len(row)}")
    part, joined, count = row
    try:
        n = int(count)
    except ValueError:
        raise SnapshotReadError(f"{p}:{line}: ServicePlanCount {count!r} is not an integer") from None
    entry = SkuCatalogEntry(part, tuple(split_plans(joined)))
    if n != entry.plan_count:
        raise SnapshotReadError(f"{p}:{line}: ServicePlanCount {n} does not match {entry.plan_count} plan(s)")
    return entry


def _file_mode(p: pathlib.Path) -> int:
    if p.exists():
        return stat.S_IMODE(p.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_snapshot(path: os.PathLike | str, entries: Iterable[SkuCatalogEntry]) -> None:
    """Replace the snapshot in full (temp file + os.replace)."""
    p = pathlib.Path(path)
    tmp = None
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=str(p.parent), prefix="._", suffix=".csv")
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh)
            writer.writerow(COLUMNS)
            for e in entries:
                writer.writerow([e.sku_part_number, e.joined_plans, e.plan_count])
        # mkstemp creates 0600; keep the old file's mode, else the umask default
        os.chmod(tmp, _file_mode(p))
        os.replace(tmp, p)
    except OSError as e:
        if tmp and os.path.exists(tmp):
            os.remove(tmp)
        raise SnapshotWriteError(f"{p}: {e}") from e
