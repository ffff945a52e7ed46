"""
Site Widget API Endpoints

Placement of widgets on one site: list, create, move, update, delete.
All orders within a position stay 1..n after every call.
"""

from flask import Blueprint, jsonify, g

from ..middleware.site_access import require_site
from ..services.site_widget_store import SiteWidgetStore, flatten
from ..utils.exceptions import ValidationError
from . import get_json_body

site_widgets_bp = Blueprint('site_widgets', __name__)

UPDATABLE_FIELDS = ('config', 'settings', 'is_visible', 'is_active')


def _store() -> SiteWidgetStore:
    return SiteWidgetStore(g.site_id)


def _required(data: dict, name: str):
    value = data.get(name)
    if value is None or value == '':
        raise ValidationError(f'{name} is required', name)
    return value


@site_widgets_bp.route('/<int:site_id>/widgets', methods=['GET'])
@require_site
def list_site_widgets(site_id):
    """
    GET /api/sites/{id}/widgets - Every instance of the site

    Returns a flat array grouped by position (template order), each group
    ordered by order.
    """
    return jsonify([w.to_dict() for w in flatten(_store().list_for_site())])


@site_widgets_bp.route('/<int:site_id>/widgets/published', methods=['GET'])
@require_site
def list_published_widgets(site_id):
    """GET /api/sites/{id}/widgets/published - Active and visible instances only"""
    return jsonify([w.to_dict() for w in flatten(_store().list_published())])


@site_widgets_bp.route('/<int:site_id>/widgets', methods=['POST'])
@require_site
def create_site_widget(site_id):
    """
    POST /api/sites/{id}/widgets - Place a widget at the end of a position

    Request Body:
        {
            "widget_slug": "text",
            "position_slug": "sidebar",
            "config": {...}  (optional)
        }
    """
    data = get_json_body()
    instance = _store().create(
        _required(data, 'widget_slug'),
        _required(data, 'position_slug'),
        data.get('config'),
    )
    return jsonify(instance.to_dict()), 201


@site_widgets_bp.route('/<int:site_id>/widgets/<instance_id>/move', methods=['POST'])
@require_site
def move_site_widget(site_id, instance_id):
    """
    POST /api/sites/{id}/widgets/{iid}/move

    Request Body:
        {"position_slug": "content", "order": 2}
    """
    data = get_json_body()
    instance = _store().move(
        instance_id,
        _required(data, 'position_slug'),
        _required(data, 'order'),
    )
    return jsonify(instance.to_dict())


@site_widgets_bp.route('/<int:site_id>/widgets/<instance_id>', methods=['PATCH'])
@require_site
def update_site_widget(site_id, instance_id):
    """
    PATCH /api/sites/{id}/widgets/{iid} - Partial update

    Request Body (any subset):
        {
            "config": {...},       shallow-merged after schema validation
            "settings": {...},     shallow-merged
            "is_visible": false,
            "is_active": true
        }
    """
    data = get_json_body()
    if not any(name in data for name in UPDATABLE_FIELDS):
        raise ValidationError(f"Provide at least one of: {', '.join(UPDATABLE_FIELDS)}")

    instance = _store().update(
        instance_id,
        config=data.get('config'),
        settings=data.get('settings'),
        is_visible=data.get('is_visible'),
        is_active=data.get('is_active'),
    )
    return jsonify(instance.to_dict())


@site_widgets_bp.route('/<int:site_id>/widgets/<instance_id>', methods=['DELETE'])
@require_site
def delete_site_widget(site_id, instance_id):
    """DELETE /api/sites/{id}/widgets/{iid} - Remove and close the gap"""
    _store().delete(instance_id)
    return '', 204
