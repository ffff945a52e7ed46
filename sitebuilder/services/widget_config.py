"""
Typed widget instance configuration.

Each widget definition's ``fields_config`` describes the editable fields of
its instances. ``WidgetConfigSchema.for_definition`` turns that description
into one schema per widget slug, so an instance's config is validated against
the variant of the widget it instantiates instead of being stored as an
arbitrary blob.

Field types: text, textarea, richtext, image, url, images, select, number,
range, checkbox, color. Types not listed accept any JSON value.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..utils.exceptions import InvalidConfigError

STRING_TYPES = {'text', 'textarea', 'richtext', 'image'}
NUMBER_TYPES = {'number', 'range'}

COLOR_PATTERN = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')
URL_PATTERN = re.compile(r'^(https?://|/|#|mailto:|tel:)')


@dataclass(frozen=True)
class FieldSpec:
    """One editable field of a widget."""
    name: str
    type: str
    label: str = ''
    required: bool = False
    default: Any = None
    options: Optional[tuple] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @classmethod
    def from_config(cls, name: str, spec: Dict[str, Any]) -> 'FieldSpec':
        options = spec.get('options')
        return cls(
            name=name,
            type=spec.get('type', 'text'),
            label=spec.get('label', name),
            required=bool(spec.get('required', False)),
            default=spec.get('default'),
            options=tuple(options) if options else None,
            min=spec.get('min'),
            max=spec.get('max'),
        )

    def coerce(self, widget_slug: str, value: Any) -> Any:
        """Validate one value, returning the value to store."""
        def fail(problem):
            raise InvalidConfigError(widget_slug, self.name, problem)

        if value is None or value == '':
            if self.required:
                fail('field is required')
            return value

        if self.type in STRING_TYPES:
            if not isinstance(value, str):
                fail('expected a string')
            return value

        if self.type == 'url':
            if not isinstance(value, str) or not URL_PATTERN.match(value):
                fail('expected an absolute or site-relative URL')
            return value

        if self.type == 'images':
            if not isinstance(value, list) or not all(isinstance(item, (str, dict)) for item in value):
                fail('expected a list of images')
            if self.required and not value:
                fail('at least one image is required')
            return value

        if self.type == 'select':
            if self.options and value not in self.options:
                fail(f"expected one of {', '.join(map(str, self.options))}")
            return value

        if self.type in NUMBER_TYPES:
            # bool is an int subclass, never a valid number here
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                fail('expected a number')
            if self.min is not None and value < self.min:
                fail(f'must be at least {self.min}')
            if self.max is not None and value > self.max:
                fail(f'must be at most {self.max}')
            return value

        if self.type == 'checkbox':
            if not isinstance(value, bool):
                fail('expected true or false')
            return value

        if self.type == 'color':
            if not isinstance(value, str) or not (value == 'transparent' or COLOR_PATTERN.match(value)):
                fail('expected a hex color')
            return value

        return value


@dataclass(frozen=True)
class WidgetConfigSchema:
    """Config variant of one widget slug."""
    widget_slug: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)

    @classmethod
    def from_fields(cls, widget_slug: str, fields_config: Optional[Dict[str, Any]]) -> 'WidgetConfigSchema':
        return cls(
            widget_slug=widget_slug,
            fields={
                name: FieldSpec.from_config(name, spec or {})
                for name, spec in (fields_config or {}).items()
            },
        )

    @classmethod
    def for_definition(cls, definition) -> 'WidgetConfigSchema':
        return cls.from_fields(definition.slug, definition.fields_config)

    @classmethod
    def settings_for_definition(cls, definition) -> 'WidgetConfigSchema':
        return cls.from_fields(definition.slug, definition.settings_config)

    @property
    def is_structured(self) -> bool:
        """Widgets without declared fields accept any JSON object."""
        return bool(self.fields)

    def defaults(self) -> Dict[str, Any]:
        """Initial config of a freshly placed instance."""
        return {
            name: spec.default
            for name, spec in self.fields.items()
            if spec.default is not None
        }

    def validate_partial(self, partial: Any) -> Dict[str, Any]:
        """
        Validate a partial config about to be shallow-merged.

        Required fields may be missing (the editor fills them in after
        placement) but may not be cleared.

        Raises:
            InvalidConfigError: on unknown keys or invalid values
        """
        if not isinstance(partial, dict):
            raise InvalidConfigError(self.widget_slug, 'config', 'expected an object')

        if not self.is_structured:
            return dict(partial)

        cleaned = {}
        for name, value in partial.items():
            spec = self.fields.get(name)
            if spec is None:
                raise InvalidConfigError(self.widget_slug, name, 'unknown field')
            cleaned[name] = spec.coerce(self.widget_slug, value)
        return cleaned

    def describe(self) -> Dict[str, Any]:
        """Schema as sent to the editor."""
        return {
            'widget_slug': self.widget_slug,
            'structured': self.is_structured,
            'fields': {
                name: {
                    'type': spec.type,
                    'label': spec.label,
                    'required': spec.required,
                    'default': spec.default,
                    'options': list(spec.options) if spec.options else None,
                    'min': spec.min,
                    'max': spec.max,
                }
                for name, spec in self.fields.items()
            },
        }


def merge_config(current: Optional[Dict[str, Any]], partial: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow merge; returns a new dict so JSON columns see the change."""
    merged = dict(current or {})
    merged.update(partial)
    return merged
