"""
Site lookup decorator.

Resolves the ``site_id`` URL parameter of site-scoped endpoints into a Site
before the view runs. Authentication is handled upstream of this service.
"""
from functools import wraps
from flask import g

from ..extensions import db
from ..models import Site
from ..utils.exceptions import SiteNotFoundError


def require_site(f):
    """
    Decorator for endpoints under /api/sites/<site_id>.

    Sets g.site and g.site_id; unknown ids raise SiteNotFoundError, which
    the app's error handler turns into a 404.

    Usage:
        @require_site
        def my_endpoint(site_id):
            site = g.site
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        site_id = kwargs.get('site_id')
        site = db.session.get(Site, site_id) if site_id is not None else None
        if site is None:
            raise SiteNotFoundError(site_id)

        g.site = site
        g.site_id = site.id

        return f(*args, **kwargs)

    return decorated_function
