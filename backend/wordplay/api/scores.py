from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user
from pydantic import ValidationError

from wordplay.main import validation_errors
from wordplay.schemas import GameResultIn, GAME_MODES
from wordplay.services.games.stats import get_leaderboard, get_user_scores, submit_game_result

scores = Blueprint('scores', __name__)


def _limit_arg(default: int) -> int:
    try:
        limit = int(request.args.get('limit', default))
    except (TypeError, ValueError):
        limit = default
    return max(1, min(limit, 500))


@scores.route('/game/score', methods=['POST'])
@login_required
def submit_score():
    try:
        result = GameResultIn.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        return jsonify({'message': 'Invalid score payload', 'errors': validation_errors(exc)}), 400

    try:
        record = submit_game_result(current_user.id, result)
    except Exception:
        current_app.logger.exception(f"[score-failed] user={current_user.id} mode={result.game_mode}")
        return jsonify({'message': 'Score not saved'}), 500

    current_app.logger.info(
        f"[score-saved] user={current_user.id} mode={record.game_mode} score={record.score} id={record.id}"
    )
    return jsonify(record.to_dict()), 201


@scores.route('/game/scores', methods=['GET'])
@login_required
def list_scores():
    limit = _limit_arg(current_app.config.get('LEADERBOARD_LIMIT', 50))
    return jsonify([s.to_dict() for s in get_user_scores(current_user.id, limit)])


@scores.route('/leaderboard', methods=['GET'])
def leaderboard():
    game_mode = request.args.get('gameMode') or None
    if game_mode is not None and game_mode not in GAME_MODES:
        return jsonify({'message': f'Unknown game mode: {game_mode}'}), 400
    limit = _limit_arg(current_app.config.get('LEADERBOARD_LIMIT', 50))
    return jsonify(get_leaderboard(game_mode, limit))
