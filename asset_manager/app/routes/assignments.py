# app/routes/assignments.py
from datetime import date

from flask import current_app, jsonify, request

from asset_manager.app.routes import assignments_bp as bp, my_assignments_bp
from asset_manager.app.services import assignments as assignment_service
from asset_manager.app.validators import parse_date, parse_list, parse_page_request, require_object


@bp.route('', methods=['POST'])
def create_assignment():
    assignment = assignment_service.create_assignment(require_object(request.get_json(silent=True)))
    return jsonify(assignment.to_dict()), 201


@bp.route('')
def search_assignments():
    page_request = parse_page_request(request.args, current_app.config['DEFAULT_PAGE_SIZE'])
    raw_date = request.args.get('assignedDate')
    assigned_date = parse_date(raw_date, 'assignedDate') if raw_date else None
    page = assignment_service.search_assignments(
        request.args.get('text', ''),
        parse_list(request.args, 'states'),
        assigned_date=assigned_date,
        page_request=page_request,
    )
    return jsonify(page.to_dict())


@bp.route('/states')
def list_assignment_states():
    return jsonify(assignment_service.assignment_states())


@my_assignments_bp.route('/<staff_code>')
def my_assignments(staff_code):
    page_request = parse_page_request(request.args, current_app.config['DEFAULT_PAGE_SIZE'])
    page = assignment_service.my_assignments(staff_code, page_request, today=date.today())
    return jsonify(page.to_dict())


@my_assignments_bp.route('/<staff_code>/<asset_code>/<assigned_date>', methods=['PUT'])
def respond_to_assignment(staff_code, asset_code, assigned_date):
    payload = require_object(request.get_json(silent=True))
    assignment = assignment_service.respond_to_assignment(
        staff_code, asset_code, assigned_date, payload.get('state'))
    return jsonify(assignment.to_dict())
