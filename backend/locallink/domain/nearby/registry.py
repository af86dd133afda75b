"""In-process registry of open home sessions.

A device owns at most one session: opening a new home screen closes the previous
one. Sessions that see no requests for ``home_session_idle_seconds`` are closed by
a background sweeper so abandoned screens release their fix subscriptions.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import suppress
from typing import Dict, List, Optional
from uuid import uuid4

from locallink.domain.nearby.location import PermissionStatus, ReportedLocationService
from locallink.domain.nearby.roster import RosterSource, SimulatedRosterSource
from locallink.domain.nearby.session import HomeSession
from locallink.obs import metrics as obs_metrics
from locallink.settings import settings

logger = logging.getLogger(__name__)


class SessionNotFound(LookupError):
    """Raised when a session id is unknown or belongs to another device."""


_sessions: Dict[str, HomeSession] = {}
_lock = asyncio.Lock()
_sweeper: Optional[asyncio.Task] = None


async def open_session(
    device_id: str,
    *,
    service_enabled: bool,
    permission: PermissionStatus,
    roster_source: Optional[RosterSource] = None,
) -> HomeSession:
    """Create a session for a device, replacing any earlier one, and start acquiring its location."""
    session = HomeSession(
        str(uuid4()),
        device_id,
        location=ReportedLocationService(service_enabled=service_enabled, permission=permission),
        roster_source=roster_source or SimulatedRosterSource(),
    )
    async with _lock:
        replaced = [existing for existing in _sessions.values() if existing.device_id == device_id]
        for existing in replaced:
            _sessions.pop(existing.id, None)
        _sessions[session.id] = session
        obs_metrics.set_home_sessions(len(_sessions))
    for existing in replaced:
        await existing.close()
        logger.info("home session replaced session=%s device=%s", existing.id, device_id)
    session.start()
    _ensure_sweeper()
    logger.info("home session opened session=%s device=%s", session.id, device_id)
    return session


async def get_session(session_id: str, device_id: str) -> HomeSession:
    """Look up a device's session and mark it active."""
    async with _lock:
        session = _sessions.get(session_id)
    if session is None or session.device_id != device_id:
        raise SessionNotFound(session_id)
    session.touch()
    return session


async def close_session(session_id: str, device_id: str) -> None:
    async with _lock:
        session = _sessions.get(session_id)
        if session is None or session.device_id != device_id:
            raise SessionNotFound(session_id)
        _sessions.pop(session_id, None)
        obs_metrics.set_home_sessions(len(_sessions))
    await session.close()
    logger.info("home session closed session=%s", session_id)


async def sweep_idle(now: Optional[float] = None) -> int:
    """Close sessions idle for longer than the configured timeout; returns how many."""
    idle_timeout = float(settings.home_session_idle_seconds)
    if idle_timeout <= 0:
        return 0
    now = time.monotonic() if now is None else now
    async with _lock:
        expired: List[HomeSession] = [
            session for session in _sessions.values() if (now - session.last_seen) > idle_timeout
        ]
        for session in expired:
            _sessions.pop(session.id, None)
        if expired:
            obs_metrics.set_home_sessions(len(_sessions))
    for session in expired:
        await session.close()
        logger.info("home session expired session=%s device=%s", session.id, session.device_id)
    return len(expired)


async def _run_sweeper() -> None:
    while True:
        idle_timeout = float(settings.home_session_idle_seconds)
        await asyncio.sleep(max(0.05, min(idle_timeout / 2, 30.0)) if idle_timeout > 0 else 30.0)
        try:
            await sweep_idle()
        except asyncio.CancelledError:
            raise
        except Exception:  # pragma: no cover - keep sweeping
            logger.exception("home session sweep failed")


def _ensure_sweeper() -> None:
    global _sweeper
    if _sweeper is None or _sweeper.done():
        _sweeper = asyncio.create_task(_run_sweeper(), name="home-session-sweeper")


def open_count(device_id: Optional[str] = None) -> int:
    if device_id is None:
        return len(_sessions)
    return sum(1 for session in _sessions.values() if session.device_id == device_id)


async def shutdown() -> None:
    """Close every open session and stop the sweeper (application shutdown/tests)."""
    global _sweeper
    sweeper, _sweeper = _sweeper, None
    if sweeper is not None:
        sweeper.cancel()
        with suppress(asyncio.CancelledError):
            await sweeper
    async with _lock:
        sessions = list(_sessions.values())
        _sessions.clear()
        obs_metrics.set_home_sessions(0)
    for session in sessions:
        await session.close()
