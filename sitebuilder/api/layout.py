"""
Site Layout API Endpoints

Sidebar side and per-position settings of a site.
"""

from flask import Blueprint, jsonify

from ..middleware.site_access import require_site
from ..services.layout_service import LayoutService
from . import get_json_body

layout_bp = Blueprint('layout', __name__)


@layout_bp.route('/<int:site_id>/layout', methods=['GET'])
@require_site
def get_layout(site_id):
    """GET /api/sites/{id}/layout - Defaults to a right-hand sidebar"""
    return jsonify({
        'success': True,
        'layout': LayoutService().get(site_id),
    })


@layout_bp.route('/<int:site_id>/layout', methods=['POST'])
@require_site
def save_layout(site_id):
    """
    POST /api/sites/{id}/layout

    Request Body:
        {"sidebar_position": "left" | "right"}
    """
    data = get_json_body()
    layout = LayoutService().save(site_id, data.get('sidebar_position'))

    return jsonify({
        'success': True,
        'layout': layout,
    })


@layout_bp.route('/<int:site_id>/positions/<position_slug>/settings', methods=['GET'])
@require_site
def get_position_settings(site_id, position_slug):
    """GET /api/sites/{id}/positions/{slug}/settings"""
    return jsonify({
        'success': True,
        'data': LayoutService().get_position_settings(site_id, position_slug),
    })


@layout_bp.route('/<int:site_id>/positions/<position_slug>/settings', methods=['PUT'])
@require_site
def save_position_settings(site_id, position_slug):
    """
    PUT /api/sites/{id}/positions/{slug}/settings

    Request Body:
        {"settings": {...}}  replaces the stored settings
    """
    data = get_json_body()
    setting = LayoutService().save_position_settings(site_id, position_slug, data.get('settings'))

    return jsonify({
        'success': True,
        'data': setting,
    })
