# app/routes/assets.py
from flask import current_app, jsonify, request

from asset_manager.app.routes import assets_bp as bp
from asset_manager.app.services import assets as asset_service
from asset_manager.app.validators import parse_list, parse_page_request, require_object


@bp.route('', methods=['POST'])
def create_asset():
    asset = asset_service.create_asset(require_object(request.get_json(silent=True)))
    return jsonify(asset.to_dict()), 201


@bp.route('/<user_id>')
def list_assets(user_id):
    page_request = parse_page_request(request.args, current_app.config['DEFAULT_PAGE_SIZE'])
    page = asset_service.list_assets(
        user_id,
        page_request,
        keyword=request.args.get('keyword', ''),
        sort_by=request.args.get('sortBy', ''),
        sort_direction=request.args.get('sortDirection', ''),
        category_ids=parse_list(request.args, 'categoryIds'),
        states=parse_list(request.args, 'states'),
    )
    return jsonify(page.to_dict())


@bp.route('/searching')
def search_assets():
    assets = asset_service.search_assets(request.args.get('text', ''))
    return jsonify({'assets': [a.to_dict() for a in assets]})


@bp.route('/<code>', methods=['PUT'])
def edit_asset(code):
    asset = asset_service.edit_asset(code, require_object(request.get_json(silent=True)))
    return jsonify(asset.to_dict())


@bp.route('/<code>', methods=['DELETE'])
def delete_asset(code):
    asset_service.delete_asset(code)
    return jsonify({'status': 'success', 'message': f'Asset {code.upper()} deleted'})


@bp.route('/asset/states')
def list_asset_states():
    return jsonify(asset_service.asset_states())


@bp.route('/report')
def asset_report():
    page_request = parse_page_request(request.args, current_app.config['REPORT_PAGE_SIZE'],
                                      page_key='pageNo', size_key='pageSize')
    page = asset_service.asset_report(page_request)
    return jsonify(page.to_dict(serialize=lambda row: row))


@bp.route('/excel')
def export_asset_report():
    return jsonify(asset_service.export_asset_report())
