"""Tests for the JSON routes: player, game loop, baseline, dashboard."""
from models import player_state


def _create(client, name='Alice', interests=('tech', 'finance')):
    resp = client.post('/players', json={'name': name, 'interests': list(interests)})
    assert resp.status_code == 201
    return resp.get_json()


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------

def test_index_lists_players_and_bank(client):
    _create(client)
    data = client.get('/').get_json()
    assert data['status'] == 'ok'
    assert data['question_count'] == 50
    assert [p['name'] for p in data['players']] == ['Alice']


def test_create_player_validation(client):
    assert client.post('/players', json={'interests': ['tech']}).status_code == 400
    assert client.post('/players', json={'name': 'Bo', 'interests': ['sports']}).status_code == 400
    assert client.post('/players', json={'name': 'Bo', 'interests': 'tech'}).status_code == 400
    _create(client, 'Bo')
    assert client.post('/players', json={'name': 'Bo'}).status_code == 409


def test_get_player(client):
    created = _create(client)
    assert client.get(f"/players/{created['id']}").get_json()['name'] == 'Alice'
    assert client.get('/players/999').status_code == 404


def test_delete_player_clears_state(client):
    player = _create(client)
    other = _create(client, 'Bo')
    client.post(f"/game/{player['id']}/next")
    client.post(f"/game/{other['id']}/next")
    assert player_state.get(player['id'], player_state.POOL) is not None

    resp = client.delete(f"/players/{player['id']}")
    assert resp.status_code == 200
    assert client.get(f"/players/{player['id']}").status_code == 404
    assert player_state.get(player['id'], player_state.POOL) is None
    assert player_state.get(player['id'], player_state.CURRENT_QUESTION) is None
    assert player_state.get(other['id'], player_state.POOL) is not None
    assert client.delete('/players/999').status_code == 404


# ---------------------------------------------------------------------------
# Game loop
# ---------------------------------------------------------------------------

def test_question_answer_loop(client):
    player = _create(client)
    question = client.post(f"/game/{player['id']}/next").get_json()
    assert 'correct_answer' not in question
    assert len(question['options']) == 4

    pending = player_state.get(player['id'], player_state.CURRENT_QUESTION)
    resp = client.post(f"/game/{player['id']}/answer", json={
        'question_id': question['id'], 'answer': pending['correct_answer'],
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['correct'] is True
    assert data['adjustment']['new_difficulty'] == 0.6
    assert 'is_in_flow' in data['flow_state']


def test_answer_without_question_is_400(client):
    player = _create(client)
    resp = client.post(f"/game/{player['id']}/answer", json={'question_id': 'tm1', 'answer': 0})
    assert resp.status_code == 400
    assert 'error' in resp.get_json()


def test_next_with_bad_config_is_400(client):
    player = _create(client)
    resp = client.post(f"/game/{player['id']}/next", json={'config': {'strategy': 'nope'}})
    assert resp.status_code == 400


def test_complete_game(client):
    player = _create(client)
    resp = client.post(f"/game/{player['id']}/complete", json={
        'category': 'tech', 'difficulty': 'medium',
        'questions_answered': 20, 'correct_answers': 18,
    })
    assert resp.status_code == 200
    data = resp.get_json()
    assert data['outcome']['result'] == 'win'
    assert data['rank']['lp_gain_text'] == '+60 LP'
    assert data['rank']['current_rank']['label'] == 'Iron II'


def test_complete_game_missing_fields(client):
    player = _create(client)
    resp = client.post(f"/game/{player['id']}/complete", json={'category': 'tech'})
    assert resp.status_code == 400


def test_game_stats(client):
    player = _create(client)
    client.post(f"/game/{player['id']}/next")
    stats = client.get(f"/game/{player['id']}/stats").get_json()
    assert stats['pool']['used_questions'] == 1
    assert stats['pool']['total_questions'] == 20


def test_reset_difficulty(client):
    player = _create(client)
    for _ in range(2):
        client.post(f"/game/{player['id']}/next")
        pending = player_state.get(player['id'], player_state.CURRENT_QUESTION)
        client.post(f"/game/{player['id']}/answer", json={
            'question_id': pending['id'], 'answer': pending['correct_answer'],
        })
    assert client.get(f"/game/{player['id']}/stats").get_json()['challenge'] > 0.5

    resp = client.post(f"/game/{player['id']}/reset-difficulty", json={'skill_level': 0.3})
    assert resp.status_code == 200
    assert resp.get_json()['challenge'] == 0.3
    assert resp.get_json()['target_difficulty'] == 'easy'
    assert client.get(f"/game/{player['id']}/stats").get_json()['challenge'] == 0.3

    bad = client.post(f"/game/{player['id']}/reset-difficulty", json={'skill_level': 2})
    assert bad.status_code == 400


def test_unknown_player_is_404(client):
    for path in ('/game/999/next', '/game/999/answer', '/game/999/complete',
                 '/baseline/999/start', '/baseline/999/submit', '/baseline/999/skip'):
        assert client.post(path, json={}).status_code == 404
    for path in ('/dashboard/999', '/dashboard/999/history', '/dashboard/999/rating-chart.svg'):
        assert client.get(path).status_code == 404


# ---------------------------------------------------------------------------
# Baseline
# ---------------------------------------------------------------------------

def test_baseline_flow(client):
    player = _create(client)
    started = client.post(f"/baseline/{player['id']}/start").get_json()
    assert started['total_questions'] == 8

    stored = player_state.get(player['id'], player_state.BASELINE_TEST)
    answers = [q['correct_answer'] for q in stored[:6]] + [None, None]
    data = client.post(f"/baseline/{player['id']}/submit", json={'answers': answers}).get_json()
    assert data['overall_accuracy'] == 75
    assert data['recommended_difficulty'] == 'medium'

    result = client.get(f"/baseline/{player['id']}/result").get_json()
    assert result['total_correct'] == 6


def test_baseline_submit_bad_answers(client):
    player = _create(client)
    client.post(f"/baseline/{player['id']}/start")
    resp = client.post(f"/baseline/{player['id']}/submit", json={'answers': [0]})
    assert resp.status_code == 400


def test_baseline_skip(client):
    player = _create(client)
    data = client.post(f"/baseline/{player['id']}/skip").get_json()
    assert data['category_ratings'] == {'tech': 1200, 'finance': 1200}
    assert client.get(f"/baseline/{player['id']}/result").status_code == 404


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def test_dashboard_overview(client):
    player = _create(client)
    data = client.get(f"/dashboard/{player['id']}").get_json()
    assert data['rating']['rank']['current_rank']['label'] == 'Iron II'
    assert data['flow_state']['recent_accuracy'] == 0.5
    assert data['difficulty']['current_level'] == 'Easy'


def test_dashboard_history_and_chart(client):
    player = _create(client)
    client.post(f"/game/{player['id']}/complete", json={
        'category': 'tech', 'difficulty': 'easy',
        'questions_answered': 10, 'correct_answers': 9,
    })
    history = client.get(f"/dashboard/{player['id']}/history").get_json()
    assert history['page'] == 1
    assert len(history['entries']) == 1

    chart = client.get(f"/dashboard/{player['id']}/rating-chart.svg")
    assert chart.status_code == 200
    assert chart.mimetype == 'image/svg+xml'
    assert b'<svg' in chart.data


def test_dashboard_analytics(client):
    player = _create(client)
    for _ in range(3):
        client.post(f"/game/{player['id']}/next")
    data = client.get('/dashboard/analytics').get_json()
    assert data['total_questions'] == 3
    assert data['is_valid'] is False
    client.post('/dashboard/analytics/reset')
    assert client.get('/dashboard/analytics').get_json()['total_questions'] == 0
