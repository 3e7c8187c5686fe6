from wordplay.services.games.registry import get_registry


def _score_payload(**overrides):
    payload = {
        'gameMode': 'anagram',
        'score': 340,
        'wordsCorrect': 4,
        'totalWords': 5,
        'averageTime': 12000,
        'longestStreak': 3,
        'gameData': {'rounds': []},
    }
    payload.update(overrides)
    return payload


def _answer_for(flask_app, session_id):
    return get_registry(flask_app).get(session_id).puzzle.answer


# ---- auth ----

def test_health(client):
    res = client.get('/api/health')
    assert res.status_code == 200
    assert res.get_json()['status'] == 'ok'


def test_register_login_logout_flow(client):
    res = client.post('/api/register', json={
        'username': 'alice', 'password': 'secret123', 'confirmPassword': 'secret123',
        'email': 'alice@example.com', 'firstName': 'Alice',
    })
    assert res.status_code == 201
    body = res.get_json()
    assert body['username'] == 'alice'
    assert body['firstName'] == 'Alice'

    res = client.get('/api/user')
    assert res.status_code == 200
    assert res.get_json()['stats'] is None

    assert client.post('/api/logout').status_code == 200
    res = client.get('/api/user')
    assert res.status_code == 401
    assert res.get_json() == {'message': 'Unauthorized'}

    res = client.post('/api/login', json={'username': 'alice', 'password': 'wrong-one'})
    assert res.status_code == 401
    res = client.post('/api/login', json={'username': 'alice', 'password': 'secret123'})
    assert res.status_code == 200
    assert client.get('/api/auth/user').status_code == 200


def test_register_rejects_bad_payloads(client):
    res = client.post('/api/register', json={'username': 'bob', 'password': '123'})
    assert res.status_code == 400
    assert res.get_json()['errors']

    res = client.post('/api/register', json={
        'username': 'bob', 'password': 'secret123', 'confirmPassword': 'secret124',
    })
    assert res.status_code == 400

    assert client.post('/api/register', json={'username': 'bob', 'password': 'secret123'}).status_code == 201
    client.post('/api/logout')
    res = client.post('/api/register', json={'username': 'bob', 'password': 'secret123'})
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Username already exists'


def test_login_requires_fields(client):
    res = client.post('/api/login', json={'username': 'alice'})
    assert res.status_code == 400


# ---- scores ----

def test_score_submission_requires_login(client):
    res = client.post('/api/game/score', json=_score_payload())
    assert res.status_code == 401


def test_score_submission_validates_payload(auth_client):
    res = auth_client.post('/api/game/score', json=_score_payload(gameMode='chess'))
    assert res.status_code == 400
    assert res.get_json()['message'] == 'Invalid score payload'

    res = auth_client.post('/api/game/score', json=_score_payload(score=-5))
    assert res.status_code == 400

    res = auth_client.post('/api/game/score', json=_score_payload(wordsCorrect=6))
    assert res.status_code == 400


def test_score_submission_updates_stats(auth_client):
    res = auth_client.post('/api/game/score', json=_score_payload())
    assert res.status_code == 201
    record = res.get_json()
    assert record['gameMode'] == 'anagram'
    assert record['score'] == 340
    assert record['gameData'] == {'rounds': []}

    stats = auth_client.get('/api/user').get_json()['stats']
    assert stats['totalGames'] == 1
    assert stats['bestScore'] == 340
    assert stats['longestStreak'] == stats['currentStreak'] == 1

    scores = auth_client.get('/api/game/scores').get_json()
    assert [s['score'] for s in scores] == [340]


def test_score_submission_failure_is_500(auth_client, monkeypatch):
    def broken(user_id, result):
        raise RuntimeError('database down')

    monkeypatch.setattr('wordplay.api.scores.submit_game_result', broken)
    res = auth_client.post('/api/game/score', json=_score_payload())
    assert res.status_code == 500
    assert res.get_json() == {'message': 'Score not saved'}


def test_leaderboard(auth_client):
    auth_client.post('/api/game/score', json=_score_payload(score=120))
    auth_client.post('/api/game/score', json=_score_payload(gameMode='speed_type', score=480))

    board = auth_client.get('/api/leaderboard').get_json()
    assert len(board) == 1
    assert board[0]['rank'] == 1
    assert board[0]['user']['username'] == 'alice'
    assert board[0]['stats']['bestScore'] == 480

    board = auth_client.get('/api/leaderboard?gameMode=anagram').get_json()
    assert board[0]['stats']['modeBestScore'] == 120

    res = auth_client.get('/api/leaderboard?gameMode=chess')
    assert res.status_code == 400


# ---- live games ----

def test_start_rejects_unknown_mode(client):
    res = client.post('/api/games/chess/start')
    assert res.status_code == 400


def test_unknown_session_is_404(client):
    for method, path in [
        ('get', '/api/games/nope/state'),
        ('post', '/api/games/nope/answer'),
        ('post', '/api/games/nope/hint'),
        ('post', '/api/games/nope/end'),
        ('post', '/api/games/nope/reset'),
        ('post', '/api/games/nope/restart'),
        ('delete', '/api/games/nope'),
    ]:
        res = getattr(client, method)(path)
        assert res.status_code == 404, path
        assert res.get_json() == {'error': 'Game session not found'}


def test_anagram_game_over_http(flask_app, client):
    res = client.post('/api/games/anagram/start')
    assert res.status_code == 201
    state = res.get_json()
    assert state['mode'] == 'anagram'
    assert state['status'] == 'in_progress'
    assert state['currentRound'] == 1
    assert state['timeRemaining'] == 60
    assert 'answer' not in state
    session_id = state['id']
    answer = _answer_for(flask_app, session_id)

    res = client.post(f'/api/games/{session_id}/hint')
    assert res.get_json()['hint'] == f'Starts with {answer[0]}'

    res = client.post(f'/api/games/{session_id}/answer', json={'answer': answer + 'X'})
    assert res.get_json()['outcome']['kind'] == 'incorrect'

    res = client.post(f'/api/games/{session_id}/answer', json={'answer': answer.lower()})
    body = res.get_json()
    assert body['outcome']['kind'] == 'correct'
    assert body['outcome']['points'] == 100
    assert body['state']['currentRound'] == 2
    assert body['state']['score'] == 100

    res = client.post(f'/api/games/{session_id}/answer', json={'answer': ''})
    assert res.get_json()['outcome'] is None

    res = client.post(f'/api/games/{session_id}/end')
    state = res.get_json()
    assert state['status'] == 'ended'
    assert state['summary']['wordsCorrect'] == 1
    assert 'answer' in state


def test_reset_restart_and_delete(client):
    session_id = client.post('/api/games/speed_type/start').get_json()['id']
    client.post(f'/api/games/{session_id}/answer', json={'answer': 'play'})

    state = client.post(f'/api/games/{session_id}/reset').get_json()
    assert state['status'] == 'not_started'
    assert state['score'] == 0
    assert state['wordsTyped'] == []

    state = client.post(f'/api/games/{session_id}/restart').get_json()
    assert state['status'] == 'in_progress'
    assert state['id'] == session_id

    res = client.delete(f'/api/games/{session_id}')
    assert res.status_code == 200
    assert client.get(f'/api/games/{session_id}/state').status_code == 404


def test_start_replaces_previous_session(flask_app, client):
    first = client.post('/api/games/anagram/start').get_json()['id']
    second = client.post('/api/games/anagram/start', json={'previous_session_id': first}).get_json()['id']
    assert first != second
    registry = get_registry(flask_app)
    assert registry.get(first) is None
    assert registry.get(second) is not None


def test_word_ladder_rejection_spends_attempt(client):
    state = client.post('/api/games/word_ladder/start').get_json()
    assert state['wordChain'] == [state['startWord']]
    assert state['maxAttempts'] == 10
    res = client.post(f"/api/games/{state['id']}/answer", json={'answer': 'ZZZZ'})
    body = res.get_json()
    assert body['outcome']['kind'] == 'incorrect'
    assert body['state']['attempts'] == 1
    assert body['state']['wordChain'] == [state['startWord']]


def test_finished_game_saves_score_for_logged_in_player(auth_client):
    session_id = auth_client.post('/api/games/speed_type/start').get_json()['id']
    auth_client.post(f'/api/games/{session_id}/answer', json={'answer': 'play game xqzz'})
    state = auth_client.post(f'/api/games/{session_id}/end').get_json()
    assert state['status'] == 'ended'
    assert state['notifications'] == []

    scores = auth_client.get('/api/game/scores').get_json()
    assert len(scores) == 1
    assert scores[0]['gameMode'] == 'speed_type'
    assert scores[0]['score'] == 80
    assert scores[0]['wordsCorrect'] == 2
    assert scores[0]['totalWords'] == 3
    assert auth_client.get('/api/user').get_json()['stats']['totalGames'] == 1


def test_anonymous_game_is_not_saved(flask_app, client):
    session_id = client.post('/api/games/speed_type/start').get_json()['id']
    client.post(f'/api/games/{session_id}/answer', json={'answer': 'play'})
    state = client.post(f'/api/games/{session_id}/end').get_json()
    assert state['status'] == 'ended'
    assert state['notifications'] == []


def test_failed_save_shows_notice_without_changing_the_game(auth_client, monkeypatch):
    def broken(user_id, result):
        raise RuntimeError('database down')

    monkeypatch.setattr('wordplay.services.games.registry.submit_game_result', broken)
    session_id = auth_client.post('/api/games/speed_type/start').get_json()['id']
    auth_client.post(f'/api/games/{session_id}/answer', json={'answer': 'magic'})
    state = auth_client.post(f'/api/games/{session_id}/end').get_json()
    assert state['status'] == 'ended'
    assert state['score'] == 50
    assert state['notifications'] == ['Score not saved']
    assert auth_client.get('/api/game/scores').get_json() == []


def test_finished_games_are_evicted_after_ttl(flask_app, client):
    flask_app.config['SESSION_TTL_SEC'] = 60
    registry = get_registry(flask_app)
    now = [1000.0]
    registry.clock = lambda: now[0]

    ended = []
    for _ in range(5):
        session_id = client.post('/api/games/speed_type/start').get_json()['id']
        client.post(f'/api/games/{session_id}/end')
        ended.append(session_id)
    assert len(registry) == 5

    # Still there for a last look at the final state
    now[0] += 59
    assert client.get(f'/api/games/{ended[-1]}/state').get_json()['status'] == 'ended'
    assert registry.sweep() == 0

    now[0] += 1
    live = client.post('/api/games/anagram/start').get_json()['id']
    assert len(registry) == 1
    assert registry.get(live) is not None
    for session_id in ended:
        assert client.get(f'/api/games/{session_id}/state').status_code == 404


def test_active_games_survive_the_sweep(flask_app, client):
    flask_app.config['SESSION_TTL_SEC'] = 60
    registry = get_registry(flask_app)
    now = [0.0]
    registry.clock = lambda: now[0]

    session_id = client.post('/api/games/speed_type/start').get_json()['id']
    now[0] += 50
    client.post(f'/api/games/{session_id}/answer', json={'answer': 'play'})
    now[0] += 50
    assert registry.sweep() == 0
    assert registry.get(session_id).status.value == 'in_progress'


def test_only_the_owner_can_change_a_saved_game(flask_app, auth_client):
    session_id = auth_client.post('/api/games/speed_type/start').get_json()['id']

    other = flask_app.test_client()
    other.post('/api/register', json={'username': 'mallory', 'password': 'secret123'})
    anonymous = flask_app.test_client()
    for intruder in (other, anonymous):
        for path in ('answer', 'hint', 'end', 'reset', 'restart'):
            res = intruder.post(f'/api/games/{session_id}/{path}', json={'answer': 'play'})
            assert res.status_code == 403, path
        assert intruder.delete(f'/api/games/{session_id}').status_code == 403
        # Watching is still allowed
        assert intruder.get(f'/api/games/{session_id}/state').status_code == 200

    state = auth_client.get(f'/api/games/{session_id}/state').get_json()
    assert state['status'] == 'in_progress'
    assert state['score'] == 0
    assert auth_client.get('/api/game/scores').get_json() == []

    res = auth_client.post(f'/api/games/{session_id}/answer', json={'answer': 'play'})
    assert res.status_code == 200
    assert res.get_json()['state']['score'] == 40


def test_start_cannot_discard_someone_elses_game(flask_app, auth_client):
    session_id = auth_client.post('/api/games/anagram/start').get_json()['id']
    other = flask_app.test_client()
    res = other.post('/api/games/anagram/start', json={'previous_session_id': session_id})
    assert res.status_code == 201
    assert get_registry(flask_app).get(session_id) is not None
