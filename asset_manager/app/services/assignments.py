"""Assignment service: create assignments, answer them, and search them."""
import logging
import smtplib
from datetime import date

from flask_mail import Message
from sqlalchemy.exc import IntegrityError

from asset_manager.app import db, mail
from asset_manager.app.errors import Conflict, InvalidArgument, NotFound
from asset_manager.app.models import Asset, Assignment, AssetState, AssignmentState, User
from asset_manager.app.models.states import match_state
from asset_manager.app import queries
from asset_manager.app.validators import parse_date, require_text

logger = logging.getLogger(__name__)

RESPONSE_STATES = (AssignmentState.ACCEPTED, AssignmentState.DECLINED)


def send_assignment_email(assignment):
    msg = Message('New Asset Assignment',
                  recipients=[assignment.assignee.email])
    msg.body = f'''Dear {assignment.assignee.full_name},

You have been assigned a new asset:
Asset: {assignment.asset.code}
Name: {assignment.asset.name}
Assigned on: {assignment.assigned_date.strftime('%Y-%m-%d')}

Please log in to the asset management system to accept or decline it.

Thank you,
IT Department
'''
    try:
        mail.send(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.warning('Could not send assignment email to %s: %s', assignment.assignee.email, e)


def _get_user(staff_code, role):
    user = db.session.get(User, staff_code)
    if user is None:
        raise NotFound(f'{role} {staff_code} not found')
    return user


def get_assignment(asset_code, assigned_date, assigned_to):
    assignment = db.session.get(Assignment, (asset_code, assigned_date, assigned_to))
    if assignment is None:
        raise NotFound(f'Assignment of {asset_code} to {assigned_to} on {assigned_date} not found')
    return assignment


def create_assignment(payload, today=None):
    asset_code = require_text(payload, 'assetCode', max_len=10).upper()
    assigned_to = require_text(payload, 'assignedTo', max_len=10)
    assigned_by = require_text(payload, 'assignedBy', max_len=10)
    assigned_date = parse_date(payload.get('assignedDate'), 'assignedDate')
    if assigned_date < (today or date.today()):
        raise InvalidArgument('assignedDate cannot be in the past')

    asset = db.session.get(Asset, asset_code)
    if asset is None:
        raise NotFound(f'Asset {asset_code} not found')
    if asset.state != AssetState.AVAILABLE.value:
        raise InvalidArgument(f'Asset {asset_code} is not available')

    assignee = _get_user(assigned_to, 'Assignee')
    if not assignee.is_active:
        raise InvalidArgument(f'User {assigned_to} is disabled')
    assigner = _get_user(assigned_by, 'Assigner')

    # Advisory only: a concurrent request can still insert the same key before
    # we commit, in which case the primary key rejects ours below.
    if queries.exists_by_composite_key(asset_code, assigned_date, assigned_to):
        raise Conflict(f'Asset {asset_code} is already assigned to {assigned_to} on {assigned_date}')

    assignment = Assignment(
        asset=asset,
        assigned_date=assigned_date,
        assignee=assignee,
        assigner=assigner,
        note=payload.get('note'),
    )
    asset.state = AssetState.ASSIGNED.value
    db.session.add(assignment)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.warning('Duplicate assignment %s/%s/%s rejected by the database',
                       asset_code, assigned_date, assigned_to)
        raise Conflict(f'Asset {asset_code} is already assigned to {assigned_to} on {assigned_date}')

    logger.info('Assigned %s to %s on %s', asset_code, assigned_to, assigned_date)
    send_assignment_email(assignment)
    return assignment


def respond_to_assignment(staff_code, asset_code, assigned_date, state):
    """The assignee accepts or declines an assignment that is waiting for them."""
    try:
        new_state = match_state(AssignmentState, state)
    except ValueError as e:
        raise InvalidArgument(str(e))
    if new_state not in RESPONSE_STATES:
        raise InvalidArgument('An assignment can only be accepted or declined')

    assignment = get_assignment(asset_code.upper(), parse_date(assigned_date, 'assignedDate'), staff_code)
    if assignment.state != AssignmentState.WAITING_FOR_ACCEPTANCE.value:
        raise Conflict(f'Assignment is already {assignment.state}')

    assignment.state = new_state.value
    if new_state is AssignmentState.DECLINED:
        assignment.asset.state = AssetState.AVAILABLE.value
    db.session.commit()
    logger.info('%s %s assignment of %s', staff_code, new_state.value.lower(), assignment.asset_code)
    return assignment


def search_assignments(text, states, assigned_date=None, page_request=None):
    """Pick the dated or undated search depending on whether a date was given."""
    if assigned_date is None:
        return queries.search_assignments(text, states, page_request)
    return queries.search_assignments_on_date(text, states, assigned_date, page_request)


def my_assignments(staff_code, page_request=None, today=None):
    _get_user(staff_code, 'User')
    return queries.list_mine(staff_code, page_request, today=today)


def assignment_states():
    return [s.value for s in AssignmentState]
