"""User service: the small part of user management assignments depend on."""
import logging

from sqlalchemy import func

from asset_manager.app import db
from asset_manager.app.errors import Conflict, InvalidArgument, NotFound
from asset_manager.app.models import User, UserRole
from asset_manager.app.queries import exists_active_assignment
from asset_manager.app.validators import require_text

logger = logging.getLogger(__name__)

STAFF_CODE_PREFIX = 'SD'


def generate_staff_code():
    # Longer codes sort after shorter ones, so SD10000 follows SD9999.
    last = (User.query
            .filter(User.staff_code.startswith(STAFF_CODE_PREFIX))
            .order_by(func.length(User.staff_code).desc(), User.staff_code.desc())
            .first())
    sequence = int(last.staff_code[len(STAFF_CODE_PREFIX):]) + 1 if last else 1
    return f'{STAFF_CODE_PREFIX}{sequence:04d}'


def create_user(payload):
    user_name = require_text(payload, 'userName', max_len=50).lower()
    email = require_text(payload, 'email', max_len=120)
    role = (payload.get('role') or UserRole.STAFF.value).lower()
    if role not in [r.value for r in UserRole]:
        raise InvalidArgument(f'Invalid role: {role}')

    if User.query.filter((User.user_name == user_name) | (User.email == email)).first():
        raise Conflict(f'User name {user_name} or email {email} is already taken')

    user = User(
        staff_code=generate_staff_code(),
        user_name=user_name,
        first_name=require_text(payload, 'firstName'),
        last_name=require_text(payload, 'lastName'),
        email=email,
        role=role,
        location_code=require_text(payload, 'locationCode', max_len=10),
    )
    db.session.add(user)
    db.session.commit()
    logger.info('Created user %s (%s)', user.staff_code, user.user_name)
    return user


def disable_user(staff_code):
    user = db.session.get(User, staff_code)
    if user is None:
        raise NotFound(f'User {staff_code} not found')
    # Users who received or handed out assets stay enabled so the history stays attributable.
    if exists_active_assignment(user.staff_code, user.staff_code):
        raise Conflict(f'User {staff_code} has valid assignments and cannot be disabled')
    user.is_active = False
    db.session.commit()
    logger.info('Disabled user %s', staff_code)
    return user
