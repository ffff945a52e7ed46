"""
Utility modules for the site builder.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_response,
    exception_response
)
from .exceptions import (
    SiteBuilderError,
    NotFoundError,
    SiteNotFoundError,
    InstanceNotFoundError,
    UnknownWidgetError,
    UnknownPositionError,
    PositionNotAllowedError,
    WidgetNotAllowedError,
    DuplicatePositionError,
    InvalidConfigError,
    WidgetInUseError,
    ValidationError,
)
