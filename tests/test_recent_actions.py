from budget_engine.recent_actions import RecentAction, RecentActionsStore


def _store(tmp_path, limit=4):
    return RecentActionsStore(path=tmp_path / 'recent.json', limit=limit)


def test_push_puts_newest_first_and_caps(tmp_path):
    store = _store(tmp_path, limit=2)

    store.push(RecentAction(id='budget', name='Budget'))
    store.push(RecentAction(id='reports', name='Reports'))
    actions = store.push(RecentAction(id='alerts', name='Alerts'))

    assert [action.id for action in actions] == ['alerts', 'reports']
    assert [action.id for action in store.load()] == ['alerts', 'reports']


def test_push_moves_existing_action_to_front(tmp_path):
    store = _store(tmp_path)
    store.push(RecentAction(id='budget', name='Budget'))
    store.push(RecentAction(id='reports', name='Reports'))

    actions = store.push(RecentAction(id='budget', name='Budget', color='#4CAF50'))

    assert [action.id for action in actions] == ['budget', 'reports']
    assert actions[0].color == '#4CAF50'


def test_missing_or_corrupt_file_loads_empty(tmp_path):
    store = _store(tmp_path)
    assert store.load() == []

    store.path.write_text('{not json')
    assert store.load() == []

    store.path.write_text('{"id": "budget"}')
    assert store.load() == []


def test_clear_removes_file(tmp_path):
    store = _store(tmp_path)
    store.push(RecentAction(id='budget', name='Budget'))

    store.clear()

    assert not store.path.exists()
    assert store.load() == []
