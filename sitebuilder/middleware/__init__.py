"""
Middleware package for the site builder.
"""
from .site_access import require_site
from .request_id import init_request_id_tracking, REQUEST_ID_HEADER
