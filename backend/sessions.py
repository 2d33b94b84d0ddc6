"""In-memory session store for managing per-user layout projects"""

import uuid
from datetime import datetime
from typing import Dict, Any, Optional

from core.project import LayoutProject
from core.layout_designer import LayoutDesigner
from core.exporter import LayoutExporter
from core.plotter import PlatePlotter

# Global session store: session_id -> session_data
_sessions: Dict[str, Dict[str, Any]] = {}


def create_session(project_name: str = "Untitled Project") -> str:
    """Create a new session with a fresh LayoutProject and return session_id"""
    session_id = str(uuid.uuid4())

    project = LayoutProject()
    project.name = project_name

    _sessions[session_id] = {
        "project": project,
        "designer": LayoutDesigner(),
        "exporter": LayoutExporter(),
        "plotter": PlatePlotter(),
        "last_accessed": datetime.now(),
    }

    return session_id


def get_session(session_id: str) -> Optional[Dict[str, Any]]:
    """Get session data by ID, updating last_accessed"""
    session = _sessions.get(session_id)
    if session:
        session["last_accessed"] = datetime.now()
    return session


def delete_session(session_id: str) -> None:
    """Remove a session"""
    _sessions.pop(session_id, None)


def clear_sessions() -> None:
    _sessions.clear()


def cleanup_expired_sessions(max_age_seconds: int = 3600) -> int:
    """Remove sessions idle longer than max_age_seconds. Returns count removed."""
    now = datetime.now()
    expired = [
        sid for sid, data in _sessions.items()
        if (now - data["last_accessed"]).total_seconds() > max_age_seconds
    ]
    for sid in expired:
        del _sessions[sid]
    return len(expired)
