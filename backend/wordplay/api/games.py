from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user

from wordplay.services.games.registry import get_registry
from wordplay.services.games.session import GameMode

games = Blueprint('games', __name__)


def _session_or_404(session_id):
    session = get_registry(current_app).get(session_id)
    if session is None:
        return None, (jsonify({'error': 'Game session not found'}), 404)
    return session, None


def _owned_session(session_id):
    """Like ``_session_or_404`` but only the player who started a saved game may change it."""
    session, error = _session_or_404(session_id)
    if error:
        return None, error
    if session.user_id is not None and (
        not current_user.is_authenticated or current_user.id != session.user_id
    ):
        return None, (jsonify({'error': 'Not your game session'}), 403)
    return session, None


@games.route('/<string:mode>/start', methods=['POST'])
def start_game(mode):
    try:
        game_mode = GameMode(mode)
    except ValueError:
        return jsonify({'error': f'Unknown game mode: {mode}'}), 400

    data = request.get_json(silent=True) or {}
    registry = get_registry(current_app)
    # Starting over from a live game replaces it
    previous = data.get('previous_session_id')
    if previous:
        old, _ = _owned_session(previous)
        if old is not None:
            registry.discard(previous)

    user_id = current_user.id if current_user.is_authenticated else None
    session = registry.create(game_mode, user_id=user_id)
    session.start()
    return jsonify(session.snapshot()), 201


@games.route('/<string:session_id>/state', methods=['GET'])
def get_game_state(session_id):
    session, error = _session_or_404(session_id)
    if error:
        return error
    return jsonify(session.snapshot())


@games.route('/<string:session_id>/answer', methods=['POST'])
def submit_answer(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    data = request.get_json(silent=True) or {}
    outcome = session.submit_answer(data.get('answer'))
    return jsonify({
        'outcome': outcome.to_dict() if outcome else None,
        'state': session.snapshot(),
    })


@games.route('/<string:session_id>/hint', methods=['POST'])
def use_hint(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    return jsonify({'hint': session.use_hint(), 'state': session.snapshot()})


@games.route('/<string:session_id>/end', methods=['POST'])
def end_game(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    session.end()
    return jsonify(session.snapshot())


@games.route('/<string:session_id>/reset', methods=['POST'])
def reset_game(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    session.reset()
    return jsonify(session.snapshot())


@games.route('/<string:session_id>/restart', methods=['POST'])
def restart_game(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    session.reset()
    session.start()
    return jsonify(session.snapshot())


@games.route('/<string:session_id>', methods=['DELETE'])
def discard_game(session_id):
    session, error = _owned_session(session_id)
    if error:
        return error
    get_registry(current_app).discard(session_id)
    return jsonify({'message': 'Game session closed'})
