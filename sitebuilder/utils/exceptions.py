"""
Custom exceptions for site builder business logic.

Every exception carries a machine-readable ``kind`` and ``code`` plus the HTTP
status it maps to, so the API layer can turn any of them into the standard
error envelope without a per-route try/except.
"""


class SiteBuilderError(Exception):
    """Base exception for all site builder business logic errors."""

    status_code = 400
    kind = 'SiteBuilderError'

    def __init__(self, message: str, code: str = "SITEBUILDER_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(SiteBuilderError):
    """Resource not found."""

    status_code = 404
    kind = 'NotFound'

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message, f"{resource.upper().replace(' ', '_')}_NOT_FOUND")


class SiteNotFoundError(NotFoundError):
    """Site id does not resolve to a site."""

    kind = 'SiteNotFound'

    def __init__(self, identifier=None):
        super().__init__("Site", identifier)


class InstanceNotFoundError(NotFoundError):
    """Move/update/delete on a stale or foreign instance id."""

    kind = 'InstanceNotFound'

    def __init__(self, identifier=None):
        super().__init__("Instance", identifier)


class UnknownWidgetError(SiteBuilderError):
    """Dangling reference to a widget definition slug."""

    status_code = 422
    kind = 'UnknownWidget'

    def __init__(self, widget_slug: str):
        self.widget_slug = widget_slug
        super().__init__(f"Unknown widget '{widget_slug}'", "UNKNOWN_WIDGET")


class UnknownPositionError(SiteBuilderError):
    """Dangling reference to a position slug of the site's template."""

    status_code = 422
    kind = 'UnknownPosition'

    def __init__(self, position_slug: str, template_id=None):
        self.position_slug = position_slug
        self.template_id = template_id
        message = f"Unknown position '{position_slug}'"
        if template_id is not None:
            message = f"Unknown position '{position_slug}' for template {template_id}"
        super().__init__(message, "UNKNOWN_POSITION")


class PositionNotAllowedError(SiteBuilderError):
    """Widget is not in the position's allow-list."""

    status_code = 422
    kind = 'PositionNotAllowed'

    def __init__(self, widget_slug: str, position_slug: str):
        self.widget_slug = widget_slug
        self.position_slug = position_slug
        super().__init__(
            f"Widget '{widget_slug}' is not allowed in position '{position_slug}'",
            "POSITION_NOT_ALLOWED"
        )


class WidgetNotAllowedError(SiteBuilderError):
    """Widget is inactive or not available for the site's type."""

    status_code = 422
    kind = 'WidgetNotAllowed'

    def __init__(self, widget_slug: str, reason: str):
        self.widget_slug = widget_slug
        self.reason = reason
        super().__init__(f"Widget '{widget_slug}' is not allowed: {reason}", "WIDGET_NOT_ALLOWED")


class DuplicatePositionError(SiteBuilderError):
    """A (template_id, slug) pair already exists."""

    status_code = 409
    kind = 'DuplicatePosition'

    def __init__(self, template_id, slug: str):
        self.template_id = template_id
        self.slug = slug
        super().__init__(
            f"Position '{slug}' already exists for template {template_id}",
            "DUPLICATE_POSITION"
        )


class InvalidConfigError(SiteBuilderError):
    """Instance config does not match the widget's field schema."""

    status_code = 422
    kind = 'InvalidConfig'

    def __init__(self, widget_slug: str, field: str, problem: str):
        self.widget_slug = widget_slug
        self.field = field
        super().__init__(f"Invalid '{field}' for widget '{widget_slug}': {problem}", "INVALID_CONFIG")


class WidgetInUseError(SiteBuilderError):
    """Widget definition is still referenced by site instances."""

    status_code = 409
    kind = 'WidgetInUse'

    def __init__(self, widget_slug: str, count: int):
        self.count = count
        super().__init__(
            f"Widget '{widget_slug}' is used by {count} instance(s) and cannot be removed",
            "WIDGET_IN_USE"
        )


class ValidationError(SiteBuilderError):
    """Invalid input data."""

    kind = 'ValidationError'

    def __init__(self, message: str, field: str = None):
        self.field = field
        code = f"INVALID_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)
