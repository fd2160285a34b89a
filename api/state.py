"""
Thread-safe state management for the ROB Planner API.

The HTTP process is the owner of route sessions: each request reads the
current session value, applies a pure transition and stores the result
under the same id. The historical reference dataset is shared by all
sessions.
"""
import threading
import logging
import uuid
from typing import Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.fuel.historical import HistoricalPoint
from src.session.route_session import RouteSession, new_session

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """No session with the requested id."""


class SessionLimitError(RuntimeError):
    """Session store is full."""


@dataclass
class SessionStore:
    """
    In-memory store of route sessions keyed by id.

    Transitions run under the lock so two concurrent requests on the same
    session cannot lose each other's update.
    """
    max_sessions: int = 1000
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _sessions: Dict[str, RouteSession] = field(default_factory=dict)

    def create(self) -> Tuple[str, RouteSession]:
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                raise SessionLimitError(f"Session limit reached ({self.max_sessions})")
            session_id = str(uuid.uuid4())
            session = new_session()
            self._sessions[session_id] = session
            logger.info(f"Route session created: {session_id}")
            return session_id, session

    def get(self, session_id: str) -> RouteSession:
        with self._lock:
            try:
                return self._sessions[session_id]
            except KeyError:
                raise SessionNotFoundError(session_id) from None

    def apply(self, session_id: str, transition: Callable[[RouteSession], RouteSession]) -> RouteSession:
        """Replace a session with ``transition(session)`` atomically."""
        with self._lock:
            updated = transition(self.get(session_id))
            self._sessions[session_id] = updated
            return updated

    def delete(self, session_id: str) -> None:
        with self._lock:
            if self._sessions.pop(session_id, None) is None:
                raise SessionNotFoundError(session_id)
            logger.info(f"Route session deleted: {session_id}")

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class ApplicationState:
    """
    Singleton application state manager.

    Use get_app_state() to access the singleton instance.
    """

    _instance: Optional['ApplicationState'] = None
    _lock: threading.Lock = threading.Lock()

    def __new__(cls):
        """Ensure singleton pattern."""
        if cls._instance is None:
            with cls._lock:
                # Double-check locking
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize application state (only once)."""
        if self._initialized:
            return

        from api.config import settings

        self._initialized = True
        self._sessions = SessionStore(max_sessions=settings.max_sessions)
        self._historical_lock = threading.RLock()
        self._historical: List[HistoricalPoint] = []
        self._historical_source: Optional[str] = None
        self._startup_time = datetime.now(timezone.utc)

        logger.info("Application state initialized")

    @property
    def sessions(self) -> SessionStore:
        return self._sessions

    @property
    def historical_points(self) -> List[HistoricalPoint]:
        with self._historical_lock:
            return list(self._historical)

    @property
    def historical_source(self) -> Optional[str]:
        with self._historical_lock:
            return self._historical_source

    def set_historical(self, points: List[HistoricalPoint], source: Optional[str]) -> None:
        with self._historical_lock:
            self._historical = list(points)
            self._historical_source = source
        logger.info(f"Historical dataset replaced: {len(points)} points from {source}")

    def load_default_historical(self) -> None:
        """Load the configured reference workbook, if any."""
        from pathlib import Path
        from src.config import settings as core_settings
        from src.database.historical_parser import load_historical_data

        path = Path(core_settings.historical_data_path)
        points = load_historical_data(
            path,
            sheet_name=core_settings.historical_sheet,
            rpm_column=core_settings.historical_rpm_column,
            consumption_column=core_settings.historical_consumption_column,
        )
        self.set_historical(points, path.name if points else None)

    @property
    def uptime_seconds(self) -> float:
        """Get application uptime in seconds."""
        return (datetime.now(timezone.utc) - self._startup_time).total_seconds()

    def health_check(self) -> Dict[str, object]:
        return {
            'sessions': len(self._sessions),
            'historical_points': len(self.historical_points),
            'uptime_seconds': self.uptime_seconds,
        }


def get_app_state() -> ApplicationState:
    """
    Get the application state singleton.

    Returns:
        ApplicationState: The singleton application state instance
    """
    return ApplicationState()


def get_session_store() -> SessionStore:
    return get_app_state().sessions
