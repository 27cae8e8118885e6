from typing import Optional

from fastapi import APIRouter, HTTPException

from invitecrawl.exceptions import SessionAlreadyRunningError
from invitecrawl.services.session_controller import SessionController


def create_sessions_router(session_controller: SessionController):
    router = APIRouter(prefix="/sessions", tags=["Sessions"])

    @router.post("/start", status_code=202)
    def start_session():
        try:
            handle = session_controller.start()
        except SessionAlreadyRunningError as e:
            raise HTTPException(status_code=409, detail=f"session {e.session_id} is already running")
        return {"status": "started", "session_id": handle.session_id}

    @router.post("/stop")
    def stop_session():
        sid = session_controller.stop()
        if sid is None:
            raise HTTPException(status_code=404, detail="no session is running")
        return {"status": "stopping", "session_id": sid}

    @router.get("/status")
    def session_status():
        active = session_controller.status()
        if active is None:
            return {"status": "idle", "session": None}
        return {"status": active["status"], "session": active}

    @router.get("/history")
    def session_history(limit: Optional[int] = 20):
        """Return the most recent sessions (most recent first)."""
        return {"sessions": session_controller.registry.list_recent(limit)}

    @router.get("/{session_id}")
    def get_session(session_id: str):
        rec = session_controller.registry.get(session_id)
        if not rec:
            raise HTTPException(status_code=404, detail="session not found")
        return rec

    return router
