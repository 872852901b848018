# /data/db.py

"""
Telescope Static-Data Interface

Read-only SQLite access to the game's static data export (SDE):
- Thread-local connections opened through a read-only file: URI
- Readers for system points, stargate connections, region boxes
- Readers for the 2-D schematic ("abstract") region layout
- System search by name

Every reader returns raw records (plain dicts, uncorrected coordinates).
Scaling and axis inversion happen once in data/datasets.py.
"""

from __future__ import annotations

import sqlite3
import threading
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from controller.log_config import get_data_logger
from settings import system_config as cfg

logger = get_data_logger('database')

ROOT = Path(__file__).resolve().parents[1]
DB_DIR = ROOT / "database"
DB_PATH = DB_DIR / "sde.db"

_active_db_path_override: Optional[Path] = None

# --- Thread-local connections ---
_tls = threading.local()


def set_active_db_path(p: Path | str) -> None:
    """Override the default database path (useful for tests or a custom SDE)."""
    global _active_db_path_override
    _active_db_path_override = Path(p)
    logger.info(f"static-data database => {_active_db_path_override}")


def get_active_db_path() -> Path:
    """Return the currently active database file path."""
    return _active_db_path_override if _active_db_path_override else DB_PATH


def get_active_db_uri() -> str:
    """Return the read-only sqlite3 file: URI for the active DB."""
    return f"file:{get_active_db_path().as_posix()}?mode=ro"


def _open_new_connection(timeout: float = 1.0) -> sqlite3.Connection:
    # mode=ro never creates the file; a missing SDE surfaces as sqlite3.OperationalError
    conn = sqlite3.connect(get_active_db_uri(), uri=True, timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA query_only = ON;")
    conn.execute("PRAGMA temp_store = MEMORY;")
    return conn


def get_connection() -> sqlite3.Connection:
    """
    Lazily open a connection bound to the CURRENT THREAD.
    Reopens when the active path changed or the previous one was closed.
    """
    conn: Optional[sqlite3.Connection] = getattr(_tls, "conn", None)
    path = get_active_db_path()
    if conn is not None and getattr(_tls, "path", None) != path:
        close_active_connection()
        conn = None
    try:
        if conn is not None:
            conn.execute("SELECT 1;")
    except sqlite3.ProgrammingError:
        conn = None

    if conn is None:
        conn = _open_new_connection()
        _tls.conn = conn
        _tls.path = path
        logger.debug(f"opened {path} on {threading.current_thread().name}")
    return conn


def close_active_connection() -> None:
    """Closes the current THREAD's database connection, if it's open."""
    conn: Optional[sqlite3.Connection] = getattr(_tls, "conn", None)
    if conn is not None:
        conn.close()
    _tls.conn = None
    _tls.path = None


def _make_in_clause(values: Sequence[int]) -> str:
    # Helper to construct (?, ?, ?, ...) safely for IN clauses
    return "(" + ",".join("?" for _ in values) + ")" if values else "(NULL)"


# ---------- Universe (full precision) ----------

def get_system_points() -> List[Dict]:
    """Every known-space system: id, name and projected x/y/z."""
    rows = get_connection().execute(
        """
        SELECT
          solarSystemId   AS id,
          solarSystemName AS name,
          projX           AS x,
          projY           AS y,
          projZ           AS z
        FROM mapSolarSystems
        WHERE solarSystemId BETWEEN ? AND ?
        ORDER BY solarSystemId
        """,
        (cfg.SYSTEM_ID_MIN, cfg.SYSTEM_ID_MAX),
    ).fetchall()
    return [dict(r) for r in rows]


def get_system_connections() -> List[Dict]:
    """Stargate connections as (connection id, system a, system b)."""
    rows = get_connection().execute(
        """
        SELECT
          systemConnectionId AS id,
          systemA            AS system_a,
          systemB            AS system_b
        FROM mapSystemConnections
        """
    ).fetchall()
    return [dict(r) for r in rows]


def get_region_labels() -> List[Dict]:
    """Per-region bounding box of its systems' projected coordinates."""
    rows = get_connection().execute(
        """
        SELECT
          mr.regionId     AS region_id,
          mr.regionName   AS region_name,
          MIN(mss.projX)  AS min_x,
          MIN(mss.projY)  AS min_y,
          MIN(mss.projZ)  AS min_z,
          MAX(mss.projX)  AS max_x,
          MAX(mss.projY)  AS max_y,
          MAX(mss.projZ)  AS max_z
        FROM mapRegions AS mr
        INNER JOIN mapConstellations AS mc ON (mc.regionId = mr.regionId)
        INNER JOIN mapSolarSystems   AS mss ON (mss.constellationId = mc.constellationId)
        WHERE mr.regionId BETWEEN ? AND ?
        GROUP BY mr.regionId, mr.regionName
        ORDER BY mr.regionId
        """,
        (cfg.REGION_ID_MIN, cfg.REGION_ID_MAX),
    ).fetchall()
    return [dict(r) for r in rows]


# ---------- Regional schematic layout ----------

def get_abstract_points(regions: Sequence[int] = ()) -> List[Dict]:
    """Schematic 2-D system positions, optionally restricted to `regions`."""
    sql = """
        SELECT
          mas.solarSystemId             AS id,
          COALESCE(mss.solarSystemName, '') AS name,
          mas.x                         AS x,
          mas.y                         AS y,
          mas.regionId                  AS region_id
        FROM mapAbstractSystems AS mas
        LEFT JOIN mapSolarSystems AS mss ON (mss.solarSystemId = mas.solarSystemId)
    """
    params: List[int] = []
    if regions:
        sql += f" WHERE mas.regionId IN {_make_in_clause(regions)}"
        params.extend(int(r) for r in regions)
    sql += " ORDER BY mas.solarSystemId"
    return [dict(r) for r in get_connection().execute(sql, params).fetchall()]


def get_abstract_connections(regions: Sequence[int] = ()) -> List[Dict]:
    """Connections between schematic positions, both ends inside `regions`."""
    sql = """
        SELECT
          msc.systemConnectionId AS id,
          masa.x                 AS a_x,
          masa.y                 AS a_y,
          masb.x                 AS b_x,
          masb.y                 AS b_y
        FROM mapSystemConnections AS msc
        INNER JOIN mapAbstractSystems AS masa ON (msc.systemA = masa.solarSystemId)
        INNER JOIN mapAbstractSystems AS masb ON (msc.systemB = masb.solarSystemId)
    """
    params: List[int] = []
    if regions:
        clause = _make_in_clause(regions)
        sql += f" WHERE masa.regionId IN {clause} AND masb.regionId IN {clause}"
        params.extend(int(r) for r in regions)
        params.extend(int(r) for r in regions)
    return [dict(r) for r in get_connection().execute(sql, params).fetchall()]


# ---------- Lookup helpers ----------

def search_systems(text: str, limit: int = cfg.SEARCH_LIMIT) -> List[Dict]:
    """Case-insensitive substring search on the systems the universe map loads."""
    text = (text or "").strip().lower()
    if not text:
        return []
    rows = get_connection().execute(
        """
        SELECT
          mss.solarSystemId   AS system_id,
          mss.solarSystemName AS name,
          mr.regionId         AS region_id,
          mr.regionName       AS region_name
        FROM mapSolarSystems AS mss
        INNER JOIN mapConstellations AS mc ON (mc.constellationId = mss.constellationId)
        INNER JOIN mapRegions        AS mr ON (mr.regionId = mc.regionId)
        WHERE LOWER(mss.solarSystemName) LIKE ?
          AND mss.solarSystemId BETWEEN ? AND ?
        ORDER BY mss.solarSystemName
        LIMIT ?
        """,
        (f"%{text}%", cfg.SYSTEM_ID_MIN, cfg.SYSTEM_ID_MAX, int(limit)),
    ).fetchall()
    return [dict(r) for r in rows]


def get_region_name(region_id: int) -> Optional[str]:
    row = get_connection().execute(
        "SELECT regionName FROM mapRegions WHERE regionId=?",
        (int(region_id),),
    ).fetchone()
    return row[0] if row else None


def get_regions() -> List[Dict]:
    rows = get_connection().execute(
        """
        SELECT regionId AS region_id, regionName AS region_name
        FROM mapRegions
        WHERE regionId BETWEEN ? AND ?
        ORDER BY regionName
        """,
        (cfg.REGION_ID_MIN, cfg.REGION_ID_MAX),
    ).fetchall()
    return [dict(r) for r in rows]


def get_counts() -> Dict[str, int]:
    conn = get_connection()
    return {
        "systems": conn.execute("SELECT COUNT(solarSystemId) FROM mapSolarSystems").fetchone()[0],
        "connections": conn.execute("SELECT COUNT(*) FROM mapSystemConnections").fetchone()[0],
        "regions": conn.execute("SELECT COUNT(regionId) FROM mapRegions").fetchone()[0],
    }
