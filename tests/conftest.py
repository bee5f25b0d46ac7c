"""Pytest fixtures: a fresh in-memory application per test."""
from datetime import date

import pytest

from asset_manager.app import create_app, db
from asset_manager.app.models import Asset, Assignment, Category, User
from asset_manager.config import TestConfig


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield


def make_user(staff_code, user_name, location_code='HN', role='staff'):
    user = User(staff_code=staff_code, user_name=user_name, first_name=user_name.title(), last_name='Tester',
                email=f'{user_name}@example.com', role=role, location_code=location_code)
    db.session.add(user)
    return user


def make_asset(code, name, category, state='Available', location_code='HN'):
    asset = Asset(code=code, name=name, category=category, installed_date=date(2023, 6, 1),
                  location_code=location_code, state=state)
    db.session.add(asset)
    return asset


def make_assignment(asset, assigned_date, assignee, assigner, state):
    assignment = Assignment(asset=asset, assigned_date=assigned_date, assignee=assignee,
                            assigner=assigner, state=state)
    db.session.add(assignment)
    return assignment


@pytest.fixture
def seeded(app):
    """Two staff users, an admin, two categories and two assets with one assignment each."""
    with app.app_context():
        admin = make_user('admin', 'admin', role='admin')
        u1 = make_user('u1', 'nguyenvana')
        u2 = make_user('u2', 'tranthib')
        laptops = Category(name='Laptop', prefix='LA')
        monitors = Category(name='Monitor', prefix='MO')
        db.session.add_all([laptops, monitors])
        ac001 = make_asset('AC001', 'Laptop Dell Latitude', laptops, state='Assigned')
        ac002 = make_asset('AC002', 'Monitor Samsung', monitors, state='Assigned')
        make_assignment(ac001, date(2024, 1, 10), u1, admin, 'Accepted')
        make_assignment(ac002, date(2024, 1, 10), u2, admin, 'Done')
        db.session.commit()
