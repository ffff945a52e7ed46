"""
Site Builder API client.

Thin requests wrapper over the /api endpoints used by the placement editor.
Every non-2xx answer raises ApiError carrying the error envelope's kind.

Usage:
    client = SiteBuilderClient('https://builder.example.org')
    widgets = client.list_instances(site_id=7)
"""

import logging
import requests
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request the server refused, or that never reached it."""

    def __init__(self, kind: str, message: str, status_code: Optional[int] = None):
        self.kind = kind
        self.message = message
        self.status_code = status_code
        super().__init__(f'{kind}: {message}')


class SiteBuilderClient:
    """HTTP client for the site builder API."""

    def __init__(self, base_url: str, session: requests.Session = None, timeout: int = 10):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, json: Dict[str, Any] = None, params: Dict[str, Any] = None) -> Any:
        url = f'{self.base_url}/api{path}'
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params={k: v for k, v in (params or {}).items() if v is not None} or None,
                headers={'Accept': 'application/json'},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f'{method} {path} failed: {e}')
            raise ApiError('NetworkError', str(e))

        if response.status_code >= 400:
            raise self._error_from(response)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from(response) -> ApiError:
        try:
            error = response.json().get('error') or {}
        except ValueError:
            error = {}
        if not isinstance(error, dict):
            error = {'message': str(error)}
        return ApiError(
            error.get('kind') or error.get('code') or 'HttpError',
            error.get('message') or f'HTTP {response.status_code}',
            response.status_code,
        )

    # ==================== Catalog & positions ====================

    def list_widgets(self, site_type: str = None, category: str = None, search: str = None) -> List[Dict[str, Any]]:
        params = {'site_type': site_type, 'category': category, 'search': search}
        return self._request('GET', '/widgets', params=params)['data']

    def widget_config(self, widget_slug: str) -> Dict[str, Any]:
        return self._request('GET', f'/widgets/{widget_slug}/config')['data']

    def list_positions(self, template_id: int, area: str = None) -> List[Dict[str, Any]]:
        return self._request('GET', f'/templates/{template_id}/widget-positions', params={'area': area})['data']

    # ==================== Site widgets ====================

    def list_instances(self, site_id: int) -> List[Dict[str, Any]]:
        return self._request('GET', f'/sites/{site_id}/widgets')

    def create_instance(
        self,
        site_id: int,
        widget_slug: str,
        position_slug: str,
        config: Dict[str, Any] = None
    ) -> Dict[str, Any]:
        body = {'widget_slug': widget_slug, 'position_slug': position_slug}
        if config:
            body['config'] = config
        return self._request('POST', f'/sites/{site_id}/widgets', json=body)

    def move_instance(self, site_id: int, instance_id: str, position_slug: str, order: int) -> Dict[str, Any]:
        return self._request(
            'POST',
            f'/sites/{site_id}/widgets/{instance_id}/move',
            json={'position_slug': position_slug, 'order': order},
        )

    def update_instance(self, site_id: int, instance_id: str, **fields: Any) -> Dict[str, Any]:
        """PATCH any of config, settings, is_visible, is_active."""
        return self._request('PATCH', f'/sites/{site_id}/widgets/{instance_id}', json=fields)

    def delete_instance(self, site_id: int, instance_id: str) -> None:
        self._request('DELETE', f'/sites/{site_id}/widgets/{instance_id}')

    # ==================== Layout ====================

    def get_layout(self, site_id: int) -> Dict[str, Any]:
        return self._request('GET', f'/sites/{site_id}/layout')['layout']

    def save_layout(self, site_id: int, sidebar_position: str) -> Dict[str, Any]:
        return self._request('POST', f'/sites/{site_id}/layout', json={'sidebar_position': sidebar_position})['layout']
