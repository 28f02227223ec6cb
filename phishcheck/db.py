# db.py
"""
Database module using SQLAlchemy (SQLite by default).
Stores analysis history and the running check counters.
"""

import os
import json
import logging
from datetime import datetime
from typing import Dict, Any, List, Optional

from sqlalchemy import create_engine, Column, Integer, Text, DateTime
from sqlalchemy.orm import sessionmaker, declarative_base

DATABASE_URL = os.getenv("PHISHCHECK_DATABASE_URL", "sqlite:///phishcheck.db")
# keep only the newest N scans (0 = unlimited); counters are never pruned
HISTORY_LIMIT = int(os.getenv("PHISHCHECK_HISTORY_LIMIT", "0"))

# risk levels counted as blocked threats
THREAT_LEVELS = ("medium", "high")

logger = logging.getLogger("db")

Base = declarative_base()
engine = None
SessionLocal = None


class Scan(Base):
    __tablename__ = "scans"
    id = Column(Integer, primary_key=True, index=True)
    url = Column(Text, index=True)
    risk_level = Column(Text, index=True)
    risk_score = Column(Integer)
    flags_json = Column(Text)
    result_json = Column(Text)  # full AnalysisResult as JSON
    created_at = Column(DateTime, default=datetime.utcnow)


class Stats(Base):
    __tablename__ = "stats"
    id = Column(Integer, primary_key=True)
    total_checks = Column(Integer, default=0, nullable=False)
    threats_blocked = Column(Integer, default=0, nullable=False)


def _make_engine(database_url: str):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


def init_db(database_url: Optional[str] = None):
    """(Re)bind the engine to `database_url` and create tables."""
    global engine, SessionLocal, DATABASE_URL
    if database_url:
        DATABASE_URL = database_url
    if engine is not None:
        engine.dispose()
    engine = _make_engine(DATABASE_URL)
    SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)
    Base.metadata.create_all(bind=engine)


def _session():
    if SessionLocal is None:
        init_db()
    return SessionLocal()


def _stats_row(session) -> Stats:
    stats = session.get(Stats, 1)
    if stats is None:
        stats = Stats(id=1, total_checks=0, threats_blocked=0)
        session.add(stats)
    return stats


def _prune_history(session) -> None:
    if HISTORY_LIMIT <= 0:
        return
    stale = (
        session.query(Scan.id)
        .order_by(Scan.created_at.desc(), Scan.id.desc())
        .offset(HISTORY_LIMIT)
        .all()
    )
    if stale:
        session.query(Scan).filter(Scan.id.in_([row.id for row in stale])).delete(synchronize_session=False)
        logger.info("Pruned %d old scans (limit=%d)", len(stale), HISTORY_LIMIT)


def record_scan(result: Dict[str, Any]) -> int:
    """Store an analysis result and bump the counters. Returns the scan id."""
    session = _session()
    try:
        scan = Scan(
            url=result["url"],
            risk_level=result["risk_level"],
            risk_score=int(result["risk_score"]),
            flags_json=json.dumps(list(result.get("flags", []))),
            result_json=json.dumps(result),
        )
        session.add(scan)
        stats = _stats_row(session)
        stats.total_checks += 1
        if result["risk_level"] in THREAT_LEVELS:
            stats.threats_blocked += 1
        session.flush()
        _prune_history(session)
        session.commit()
        session.refresh(scan)
        return scan.id
    except Exception:
        logger.exception("Failed to record scan for %s, rolling back", result.get("url"))
        session.rollback()
        raise
    finally:
        session.close()


def _row_summary(scan: Scan) -> Dict[str, Any]:
    return {
        "id": scan.id,
        "url": scan.url,
        "risk_level": scan.risk_level,
        "risk_score": scan.risk_score,
        "flags": json.loads(scan.flags_json or "[]"),
        "created_at": scan.created_at.isoformat(),
    }


def get_scan(scan_id: int) -> Optional[Dict[str, Any]]:
    session = _session()
    try:
        scan = session.query(Scan).filter(Scan.id == scan_id).first()
    finally:
        session.close()
    if not scan:
        return None
    item = _row_summary(scan)
    item["result"] = json.loads(scan.result_json)
    return item


def list_scans(limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    session = _session()
    try:
        rows = (
            session.query(Scan)
            .order_by(Scan.created_at.desc(), Scan.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
    finally:
        session.close()
    return [_row_summary(r) for r in rows]


def clear_history() -> int:
    """Delete all stored scans. Counters are kept. Returns rows deleted."""
    session = _session()
    try:
        deleted = session.query(Scan).delete()
        session.commit()
        return deleted
    finally:
        session.close()


def get_stats() -> Dict[str, int]:
    session = _session()
    try:
        stats = session.get(Stats, 1)
        if stats is None:
            return {"total_checks": 0, "threats_blocked": 0}
        return {"total_checks": stats.total_checks, "threats_blocked": stats.threats_blocked}
    finally:
        session.close()


def reset_stats() -> None:
    session = _session()
    try:
        session.query(Stats).delete()
        session.commit()
    finally:
        session.close()
