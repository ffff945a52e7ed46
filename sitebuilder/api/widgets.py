"""
Widget Catalog API Endpoints

Read-only listing of the widget kinds an editor can drag onto a site.
"""

from flask import Blueprint, request, jsonify

from ..services.widget_catalog import WidgetCatalog

widgets_bp = Blueprint('widgets', __name__)


@widgets_bp.route('', methods=['GET'])
def list_widgets():
    """
    GET /api/widgets - List active widget definitions

    Query Params:
        site_type: Only widgets available for this site type
        category: Only this category
        search: Case-insensitive match on name or description
    """
    definitions = WidgetCatalog().list_active(
        site_type=request.args.get('site_type') or None,
        category=request.args.get('category') or None,
        search=request.args.get('search') or None,
    )

    return jsonify({
        'success': True,
        'data': [d.to_dict() for d in definitions],
    })


@widgets_bp.route('/categories', methods=['GET'])
def list_categories():
    """GET /api/widgets/categories - Categories of active widgets"""
    return jsonify({
        'success': True,
        'data': WidgetCatalog().categories(),
    })


@widgets_bp.route('/<slug>/config', methods=['GET'])
def get_widget_config(slug):
    """
    GET /api/widgets/{slug}/config - Config and settings schema of a widget

    Unknown slugs answer 422 UNKNOWN_WIDGET.
    """
    catalog = WidgetCatalog()
    definition = catalog.get(slug)
    schema = catalog.schema_for(slug)

    return jsonify({
        'success': True,
        'data': {
            'widget': definition.to_dict(),
            'config': schema.describe(),
            'defaults': schema.defaults(),
            'settings_config': definition.settings_config or {},
        },
    })
