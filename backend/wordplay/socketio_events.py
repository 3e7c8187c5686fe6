from flask_socketio import join_room, leave_room, emit
from flask import current_app, request
from wordplay import socketio
from wordplay.services.games.registry import get_registry, session_room
from typing import Dict, Any
import time


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_disconnect(*args):
    # The viewer that owns a game going away is a teardown: once no owner
    # remains, the session is discarded and its timer cancelled
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx or not ctx.get('is_owner'):
        return
    session_id = ctx['session_id']
    _owner_count[session_id] = max(0, _owner_count.get(session_id, 0) - 1)
    app = current_app._get_current_object()
    if app.config.get('TESTING'):
        if _owner_count.get(session_id, 0) == 0:
            _close_session(app, session_id)
        return
    _schedule_close_if_no_owner(app, session_id)


def handle_join_session(data):
    session_id = (data or {}).get('session_id')
    is_owner = bool((data or {}).get('is_owner'))
    if not session_id:
        emit('error', {'message': 'session_id is required'})
        return
    session = get_registry(current_app).get(session_id)
    if session is None:
        emit('error', {'message': 'Game session not found'})
        return
    room = session_room(session_id)
    join_room(room)
    _sid_to_ctx[_get_sid()] = {'session_id': session_id, 'is_owner': is_owner}
    if is_owner:
        _owner_count[session_id] = _owner_count.get(session_id, 0) + 1
        _close_deadline.pop(session_id, None)
    emit('joined', {'room': room})
    emit('state_update', session.snapshot())


def handle_leave_session(data):
    session_id = (data or {}).get('session_id')
    if not session_id:
        emit('error', {'message': 'session_id is required'})
        return
    room = session_room(session_id)
    leave_room(room)
    emit('left', {'room': room})
    ctx = _sid_to_ctx.get(_get_sid())
    if ctx and ctx.get('is_owner') and ctx.get('session_id') == session_id:
        # Navigating away: close immediately
        _sid_to_ctx.pop(_get_sid(), None)
        _close_session(current_app._get_current_object(), session_id)


def handle_ping(data):
    emit('pong', data or {})

# ---- Session owner lifecycle helpers ----

_sid_to_ctx: Dict[str, Dict[str, Any]] = {}
_owner_count: Dict[str, int] = {}
_close_deadline: Dict[str, float] = {}


def _get_sid() -> str:
    return request.sid  # type: ignore[attr-defined]


def _close_session(app, session_id: str) -> None:
    """Discard the session (cancelling its timer) and tell remaining viewers."""
    get_registry(app).discard(session_id)
    socketio.emit('session_closed', {'session_id': session_id}, to=session_room(session_id), namespace='/ws')
    _owner_count.pop(session_id, None)
    _close_deadline.pop(session_id, None)


def _schedule_close_if_no_owner(app, session_id: str, delay_sec: float = 5.0) -> None:
    if _owner_count.get(session_id, 0) > 0:
        return
    _close_deadline[session_id] = time.time() + delay_sec

    def _runner(sid: str, deadline: float):
        socketio.sleep(max(0.0, deadline - time.time()))
        if _owner_count.get(sid, 0) == 0 and _close_deadline.get(sid) == deadline:
            _close_session(app, sid)

    socketio.start_background_task(_runner, session_id, _close_deadline[session_id])


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
        socketio.on_event('join_session', handle_join_session, namespace=namespace)
        socketio.on_event('leave_session', handle_leave_session, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
