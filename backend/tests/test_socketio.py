STROKE = {'from': {'x': 0, 'y': 0}, 'to': {'x': 10, 'y': 10}, 'color': '#000000', 'width': 3}


def _named(received, name):
    return [pkt['args'][0] if pkt['args'] else None for pkt in received if pkt['name'] == name]


def _join(sio_factory, nickname, team_id='pearl-tea-latte'):
    test_client = sio_factory()
    test_client.emit('join-room', {'nickname': nickname, 'teamId': team_id})
    return test_client


def test_first_player_becomes_painter(sio_factory):
    alice = _join(sio_factory, 'Alice')
    received = alice.get_received()

    state = _named(received, 'room-state')[-1]
    assert state['round'] == 1
    assert state['players'][0]['nickname'] == 'Alice'
    assert state['players'][0]['role'] == 'painter'
    assert _named(received, 'your-turn-to-draw')[0]['word']


def test_stroke_reaches_others_but_not_painter(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    alice.emit('draw-stroke', STROKE)

    assert _named(bob.get_received(), 'stroke-received') == [STROKE]
    assert _named(alice.get_received(), 'stroke-received') == []


def test_guesser_strokes_are_ignored(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    bob.emit('draw-stroke', STROKE)
    bob.emit('clear-canvas')

    assert alice.get_received() == []


def test_clear_canvas_reaches_everyone(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    alice.emit('clear-canvas')

    assert len(_named(alice.get_received(), 'canvas-cleared')) == 1
    assert len(_named(bob.get_received(), 'canvas-cleared')) == 1


def test_wrong_guess_feedback_is_private(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    bob.emit('submit-guess', {'guess': 'definitely not a word'})

    bob_received = bob.get_received()
    alice_received = alice.get_received()
    assert _named(bob_received, 'guess-result')[0]['correct'] is False
    assert _named(alice_received, 'guess-result') == []
    assert _named(alice_received, 'guess-bubble')[0]['text'] == 'definitely not a word'


def test_correct_guess_is_announced_to_room(sio_factory):
    alice = _join(sio_factory, 'Alice')
    word = _named(alice.get_received(), 'your-turn-to-draw')[0]['word']
    bob = _join(sio_factory, 'Bob')
    carol = _join(sio_factory, 'Carol')
    for c in (alice, bob, carol):
        c.get_received()

    bob.emit('submit-guess', {'guess': word.upper()})

    for c in (alice, bob, carol):
        received = c.get_received()
        result = _named(received, 'guess-result')[0]
        assert result['correct'] is True
        assert result['guesserNickname'] == 'Bob'
        assert result['points'] >= 50
        scores = {p['nickname']: p['score'] for p in _named(received, 'room-state')[-1]['players']}
        assert scores['Alice'] == 30
        assert scores['Bob'] == result['points']


def test_painter_disconnect_hands_turn_over(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    alice.disconnect()

    received = bob.get_received()
    assert _named(received, 'answer-reveal') == []
    assert _named(received, 'round-start')[0]['round'] == 2
    assert _named(received, 'round-start')[0]['painterNickname'] == 'Bob'
    assert _named(received, 'your-turn-to-draw')


def test_invalid_nickname_is_rejected(sio_factory):
    mallory = sio_factory()
    mallory.emit('join-room', {'nickname': '<script>'})

    received = mallory.get_received()
    assert _named(received, 'room-error') == [{'error': 'invalid_nickname'}]
    assert _named(received, 'room-state') == []


def test_blank_nickname_gets_placeholder(sio_factory):
    anon = sio_factory()
    anon.emit('join-room', {'teamId': 'lime-tea'})

    player = _named(anon.get_received(), 'room-state')[-1]['players'][0]
    assert player['nickname'].startswith('玩家')
    assert player['teamId'] == 'lime-tea'


def test_actions_before_joining_are_ignored(sio_factory):
    lurker = sio_factory()
    lurker.get_received()

    lurker.emit('draw-stroke', STROKE)
    lurker.emit('submit-guess', {'guess': 'cat'})
    lurker.emit('restart-game')

    assert lurker.get_received() == []


def test_restart_game_starts_over(sio_factory):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    bob.emit('restart-game')

    received = bob.get_received()
    restart = _named(received, 'game-restart')[0]
    assert restart['round'] == 1
    assert restart['painterNickname'] == 'Alice'
    assert _named(alice.get_received(), 'your-turn-to-draw')


def test_joining_another_room_leaves_the_first(sio_factory, client):
    alice = _join(sio_factory, 'Alice')
    bob = _join(sio_factory, 'Bob')
    alice.get_received()
    bob.get_received()

    alice.emit('join-room', {'nickname': 'Alice', 'roomId': 'other'})

    received = bob.get_received()
    round_start = _named(received, 'round-start')[0]
    assert round_start['round'] == 2
    assert round_start['painterNickname'] == 'Bob'
    assert [p['nickname'] for p in _named(received, 'room-state')[-1]['players']] == ['Bob']

    default_room = client.get('/api/rooms/default-room').get_json()
    assert [p['nickname'] for p in default_room['players']] == ['Bob']
    other_room = client.get('/api/rooms/other').get_json()
    assert [p['nickname'] for p in other_room['players']] == ['Alice']
    assert other_room['players'][0]['role'] == 'painter'

    alice.get_received()
    alice.emit('draw-stroke', STROKE)
    assert _named(bob.get_received(), 'stroke-received') == []
