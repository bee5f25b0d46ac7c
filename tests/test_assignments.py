from datetime import date, timedelta

from asset_manager.app import db, mail
from asset_manager.app.models import Asset, Assignment, Category, User
from asset_manager.app.services import assignments as assignment_service

from conftest import make_asset, make_assignment


def add_available_asset(app, code='LA000050', name='Laptop HP EliteBook'):
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        make_asset(code, name, category)
        db.session.commit()


def test_create_assignment(client, app, seeded):
    add_available_asset(app)
    today = date.today().isoformat()

    with mail.record_messages() as outbox:
        response = client.post('/admin/api/assignments', json={
            'assetCode': 'la000050',
            'assignedTo': 'u2',
            'assignedBy': 'admin',
            'assignedDate': today,
            'note': 'For the new project',
        })

    assert response.status_code == 201
    data = response.get_json()
    assert data['assetCode'] == 'LA000050'
    assert data['state'] == 'Waiting for acceptance'
    assert data['assignedToUserName'] == 'tranthib'
    assert len(outbox) == 1
    assert outbox[0].recipients == ['tranthib@example.com']
    assert 'LA000050' in outbox[0].body

    with app.app_context():
        assert db.session.get(Asset, 'LA000050').state == 'Assigned'


def test_create_assignment_rejects_unavailable_asset(client, seeded):
    response = client.post('/admin/api/assignments', json={
        'assetCode': 'AC001', 'assignedTo': 'u2', 'assignedBy': 'admin',
        'assignedDate': date.today().isoformat(),
    })
    assert response.status_code == 400
    assert 'not available' in response.get_json()['error']


def test_create_assignment_rejects_past_date(client, app, seeded):
    add_available_asset(app)
    response = client.post('/admin/api/assignments', json={
        'assetCode': 'LA000050', 'assignedTo': 'u2', 'assignedBy': 'admin',
        'assignedDate': (date.today() - timedelta(days=1)).isoformat(),
    })
    assert response.status_code == 400


def test_create_assignment_unknown_references(client, app, seeded):
    add_available_asset(app)
    payload = {'assetCode': 'XX000001', 'assignedTo': 'u2', 'assignedBy': 'admin',
               'assignedDate': date.today().isoformat()}
    assert client.post('/admin/api/assignments', json=payload).status_code == 404

    payload['assetCode'] = 'LA000050'
    payload['assignedTo'] = 'nobody'
    assert client.post('/admin/api/assignments', json=payload).status_code == 404


def test_create_assignment_duplicate_key_is_conflict(client, app, seeded):
    today = date.today()
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        asset = make_asset('LA000060', 'Laptop Lenovo', category)
        make_assignment(asset, today, db.session.get(User, 'u2'), db.session.get(User, 'admin'), 'Declined')
        db.session.commit()

    response = client.post('/admin/api/assignments', json={
        'assetCode': 'LA000060', 'assignedTo': 'u2', 'assignedBy': 'admin',
        'assignedDate': today.isoformat(),
    })
    assert response.status_code == 409


def test_duplicate_that_slips_past_the_check_is_conflict(client, app, seeded, monkeypatch):
    today = date.today()
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        asset = make_asset('LA000061', 'Laptop Asus', category)
        make_assignment(asset, today, db.session.get(User, 'u2'), db.session.get(User, 'admin'), 'Declined')
        db.session.commit()

    # Simulate a concurrent insert landing between the existence check and our commit.
    monkeypatch.setattr(assignment_service.queries, 'exists_by_composite_key', lambda *args: False)
    response = client.post('/admin/api/assignments', json={
        'assetCode': 'LA000061', 'assignedTo': 'u2', 'assignedBy': 'admin',
        'assignedDate': today.isoformat(),
    })
    assert response.status_code == 409

    with app.app_context():
        assert Assignment.query.filter_by(asset_code='LA000061').count() == 1
        assert db.session.get(Asset, 'LA000061').state == 'Available'


def test_search_assignments_with_date(client, seeded):
    response = client.get('/admin/api/assignments?text=AC&states=Accepted,Done&assignedDate=2024-01-10')
    assert response.status_code == 200
    data = response.get_json()
    assert [a['assetCode'] for a in data['items']] == ['AC001']
    assert data['total'] == 1
    assert data['pages'] == 1


def test_search_assignments_without_date(client, seeded):
    response = client.get('/admin/api/assignments?states=Accepted&states=Declined&text=dell')
    assert response.status_code == 200
    assert [a['assetCode'] for a in response.get_json()['items']] == ['AC001']


def test_search_assignments_requires_states(client, seeded):
    response = client.get('/admin/api/assignments?text=AC')
    assert response.status_code == 400
    assert 'state' in response.get_json()['error']


def test_search_assignments_bad_parameters(client, seeded):
    assert client.get('/admin/api/assignments?states=Accepted&assignedDate=10/01/2024').status_code == 400
    assert client.get('/admin/api/assignments?states=Accepted&page=zero').status_code == 400
    assert client.get('/admin/api/assignments?states=Accepted&size=1000').status_code == 400


def test_assignment_states(client):
    response = client.get('/admin/api/assignments/states')
    assert response.get_json() == ['Waiting for acceptance', 'Accepted', 'Declined', 'Done']


def test_my_assignments(client, app, seeded):
    today = date.today()
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        u1 = db.session.get(User, 'u1')
        admin = db.session.get(User, 'admin')
        make_assignment(make_asset('LA000070', 'Today', category), today, u1, admin, 'Waiting for acceptance')
        make_assignment(make_asset('LA000071', 'Later', category), today + timedelta(days=3), u1, admin,
                        'Accepted')
        db.session.commit()

    response = client.get('/api/assignments/u1')
    assert response.status_code == 200
    assert [a['assetCode'] for a in response.get_json()['items']] == ['LA000070', 'AC001']

    assert client.get('/api/assignments/nobody').status_code == 404


def test_accept_assignment(client, app, seeded):
    today = date.today()
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        make_assignment(make_asset('LA000080', 'Laptop', category, state='Assigned'), today,
                        db.session.get(User, 'u1'), db.session.get(User, 'admin'), 'Waiting for acceptance')
        db.session.commit()

    url = f'/api/assignments/u1/LA000080/{today.isoformat()}'
    response = client.put(url, json={'state': 'accepted'})
    assert response.status_code == 200
    assert response.get_json()['state'] == 'Accepted'

    # Already answered
    assert client.put(url, json={'state': 'Declined'}).status_code == 409


def test_decline_assignment_frees_the_asset(client, app, seeded):
    today = date.today()
    with app.app_context():
        category = Category.query.filter_by(prefix='LA').one()
        make_assignment(make_asset('LA000081', 'Laptop', category, state='Assigned'), today,
                        db.session.get(User, 'u1'), db.session.get(User, 'admin'), 'Waiting for acceptance')
        db.session.commit()

    response = client.put(f'/api/assignments/u1/LA000081/{today.isoformat()}', json={'state': 'Declined'})
    assert response.status_code == 200
    with app.app_context():
        assert db.session.get(Asset, 'LA000081').state == 'Available'


def test_respond_rejects_other_states_and_missing_assignments(client, seeded):
    assert client.put('/api/assignments/u1/AC001/2024-01-10', json={'state': 'Done'}).status_code == 400
    assert client.put('/api/assignments/u1/AC001/2024-01-11', json={'state': 'Accepted'}).status_code == 404
