"""Asset service: create, edit, delete, list and report on assets."""
import logging
import re

from sqlalchemy import case, func, or_

from asset_manager.app import db
from asset_manager.app.errors import Conflict, InvalidArgument, NotFound
from asset_manager.app.models import Asset, AssetState, Category, User
from asset_manager.app.models.states import match_state
from asset_manager.app.queries import Page, contains_text, find_by_asset
from asset_manager.app.validators import parse_date, parse_int, require_text

logger = logging.getLogger(__name__)

CODE_DIGITS = 6
PREFIX_PATTERN = re.compile(r'[A-Z]{2}')

# States an asset may be created in; the other states are reached through assignments or recycling.
CREATABLE_STATES = (AssetState.AVAILABLE, AssetState.NOT_AVAILABLE)

SORT_FIELDS = {
    'code': Asset.code,
    'name': Asset.name,
    'category': Category.name,
    'state': Asset.state,
}

REPORT_COLUMNS = (
    ('assigned', AssetState.ASSIGNED),
    ('available', AssetState.AVAILABLE),
    ('notAvailable', AssetState.NOT_AVAILABLE),
    ('waitingForRecycling', AssetState.WAITING_FOR_RECYCLING),
    ('recycled', AssetState.RECYCLED),
)


def _parse_state(value, allowed=None):
    try:
        state = match_state(AssetState, value)
    except ValueError as e:
        raise InvalidArgument(str(e))
    if allowed is not None and state not in allowed:
        raise InvalidArgument(f'Asset state must be one of: {", ".join(s.value for s in allowed)}')
    return state


def get_asset(code):
    asset = db.session.get(Asset, str(code).strip().upper())
    if asset is None:
        raise NotFound(f'Asset {code} not found')
    return asset


def generate_asset_code(category):
    """Next code for ``category``: its prefix followed by a zero-padded sequence number."""
    # Longer codes sort after shorter ones so the sequence keeps growing past the padding width.
    last = (Asset.query
            .filter(Asset.code.startswith(category.prefix))
            .order_by(func.length(Asset.code).desc(), Asset.code.desc())
            .first())
    sequence = int(last.code[len(category.prefix):]) + 1 if last else 1
    return f'{category.prefix}{sequence:0{CODE_DIGITS}d}'


def create_asset(payload):
    name = require_text(payload, 'name')
    location_code = require_text(payload, 'locationCode', max_len=10)
    installed_date = parse_date(payload.get('installedDate'), 'installedDate')
    state = _parse_state(payload.get('state') or AssetState.AVAILABLE.value, CREATABLE_STATES)

    category_id = parse_int(payload.get('categoryId'), 'categoryId', None)
    if category_id is None:
        raise InvalidArgument('categoryId is required')
    category = db.session.get(Category, category_id)
    if category is None:
        raise NotFound(f'Category {category_id} not found')

    asset = Asset(
        code=generate_asset_code(category),
        name=name,
        category=category,
        installed_date=installed_date,
        location_code=location_code,
        state=state,
        specification=payload.get('specification'),
    )
    db.session.add(asset)
    db.session.commit()
    logger.info('Created asset %s (%s)', asset.code, asset.name)
    return asset


def edit_asset(code, payload):
    asset = get_asset(code)
    if asset.state == AssetState.ASSIGNED.value:
        raise Conflict(f'Asset {asset.code} is assigned and cannot be edited')

    if 'name' in payload:
        asset.name = require_text(payload, 'name')
    if 'specification' in payload:
        asset.specification = payload['specification']
    if 'installedDate' in payload:
        asset.installed_date = parse_date(payload['installedDate'], 'installedDate')
    if 'state' in payload:
        editable = tuple(s for s in AssetState if s is not AssetState.ASSIGNED)
        asset.state = _parse_state(payload['state'], editable).value

    db.session.commit()
    logger.info('Edited asset %s', asset.code)
    return asset


def delete_asset(code):
    asset = get_asset(code)
    if find_by_asset(asset.code):
        logger.warning('Refusing to delete asset %s: it has assignments', asset.code)
        raise Conflict(f'Asset {asset.code} belongs to an existing assignment and cannot be deleted')
    db.session.delete(asset)
    db.session.commit()
    logger.info('Deleted asset %s', asset.code)


def list_assets(user_id, page_request, keyword='', sort_by='', sort_direction='', category_ids=(), states=()):
    """Assets at the location of ``user_id``, filtered and sorted for the admin asset list."""
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound(f'User {user_id} not found')

    query = Asset.query.join(Category).filter(Asset.location_code == user.location_code)

    if keyword and keyword.strip():
        query = query.filter(or_(contains_text(Asset.code, keyword),
                                 contains_text(Asset.name, keyword)))

    if category_ids:
        try:
            ids = [int(c) for c in category_ids]
        except ValueError:
            raise InvalidArgument(f'Invalid category ids: {category_ids}')
        query = query.filter(Asset.category_id.in_(ids))

    if states:
        query = query.filter(Asset.state.in_([_parse_state(s).value for s in states]))

    column = SORT_FIELDS.get(sort_by or 'code')
    if column is None:
        raise InvalidArgument(f'Cannot sort by {sort_by}')
    if (sort_direction or 'asc').lower() not in ('asc', 'desc'):
        raise InvalidArgument(f'Sort direction must be asc or desc, got {sort_direction}')
    ordered = column.desc() if (sort_direction or '').lower() == 'desc' else column.asc()
    query = query.order_by(ordered, Asset.code.asc())

    pagination = query.paginate(page=page_request.page, per_page=page_request.size, error_out=False)
    return Page.from_pagination(pagination)


def search_assets(text):
    query = Asset.query
    if text and text.strip():
        query = query.filter(or_(contains_text(Asset.code, text),
                                 contains_text(Asset.name, text)))
    return query.order_by(Asset.code).all()


def asset_states():
    return [s.value for s in AssetState]


def _report_query():
    columns = [func.count(Asset.code).label('total')]
    columns += [func.coalesce(func.sum(case((Asset.state == state.value, 1), else_=0)), 0).label(key)
                for key, state in REPORT_COLUMNS]
    return (db.session.query(Category.name.label('category'), *columns)
            .outerjoin(Asset, Asset.category_id == Category.id)
            .group_by(Category.id, Category.name)
            .order_by(Category.name))


def _report_row(row):
    result = {'category': row.category, 'total': row.total}
    for key, _ in REPORT_COLUMNS:
        result[key] = int(getattr(row, key))
    return result


def asset_report(page_request):
    """Asset counts by category and state, one row per category."""
    total = Category.query.count()
    offset = (page_request.page - 1) * page_request.size
    rows = _report_query().limit(page_request.size).offset(offset).all()
    return Page(items=[_report_row(r) for r in rows], page=page_request.page,
                size=page_request.size, total=total)


def export_asset_report():
    return [_report_row(r) for r in _report_query().all()]


def create_category(payload):
    name = require_text(payload, 'name')
    prefix = require_text(payload, 'prefix', max_len=2).upper()
    if not PREFIX_PATTERN.fullmatch(prefix):
        raise InvalidArgument(f'prefix must be exactly two letters, got {prefix!r}')
    if Category.query.filter(or_(func.lower(Category.name) == name.lower(), Category.prefix == prefix)).first():
        raise Conflict(f'Category {name} or prefix {prefix} already exists')
    category = Category(name=name, prefix=prefix)
    db.session.add(category)
    db.session.commit()
    logger.info('Created category %s (%s)', category.name, category.prefix)
    return category

