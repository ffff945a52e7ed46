"""
Widget Position API Endpoints

Named slots of a site template, and which widgets each slot accepts.
"""

from flask import Blueprint, request, jsonify

from ..services.position_registry import WidgetPositionRegistry
from . import get_json_body

widget_positions_bp = Blueprint('widget_positions', __name__)


@widget_positions_bp.route('/<int:template_id>/widget-positions', methods=['GET'])
def list_positions(template_id):
    """
    GET /api/templates/{id}/widget-positions - Active positions of a template

    Query Params:
        area: Only positions of this area
        grouped: When truthy, answer {area: [positions]} instead of a list
    """
    registry = WidgetPositionRegistry()

    if request.args.get('grouped') in ('1', 'true', 'yes'):
        grouped = registry.grouped_by_area(template_id)
        return jsonify({
            'success': True,
            'data': {area: [p.to_dict() for p in positions] for area, positions in grouped.items()},
        })

    positions = registry.list_for_template(template_id, area=request.args.get('area') or None)
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in positions],
    })


@widget_positions_bp.route('/<int:template_id>/widget-positions/<slug>/widgets', methods=['GET'])
def list_position_widgets(template_id, slug):
    """
    GET /api/templates/{id}/widget-positions/{slug}/widgets - Droppable widgets

    Query Params:
        site_type: Also apply the catalog's site type restriction
    """
    definitions = WidgetPositionRegistry().available_widgets(
        template_id,
        slug,
        site_type=request.args.get('site_type') or None,
    )

    return jsonify({
        'success': True,
        'data': [d.to_dict() for d in definitions],
    })


@widget_positions_bp.route('/<int:template_id>/widget-positions/<slug>/layout', methods=['PATCH'])
def update_position_layout(template_id, slug):
    """
    PATCH /api/templates/{id}/widget-positions/{slug}/layout

    Request Body:
        {"layout_config": {"width": "full", "alignment": "center"}}
    """
    data = get_json_body()
    position = WidgetPositionRegistry().update_layout(template_id, slug, data.get('layout_config'))

    return jsonify({
        'success': True,
        'data': position.to_dict(),
    })
