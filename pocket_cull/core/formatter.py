"""
Item output templates.

Templates use str.format fields, e.g. "{item_id} {title} <{url}>".
"""

import string

from ..exceptions import ConfigError

DEFAULT_TEMPLATE = "[{item_id:>9}] ({time_added:%a, %d %b %Y %H:%M:%S %Z}) {title}\n<{url}>"

FIELDS = (
    'item_id',
    'url',
    'title',
    'time_added',
    'sort_id',
    'given_url',
    'resolved_url',
    'excerpt',
    'status',
)


def _item_fields(item):
    return {name: getattr(item, name) for name in FIELDS}


class ItemFormatter:
    def __init__(self, template=None):
        self.template = template or DEFAULT_TEMPLATE
        try:
            parsed = list(string.Formatter().parse(self.template))
        except ValueError as e:
            raise ConfigError(f"Invalid format template {self.template!r}: {e}") from e

        for _, field_name, _, _ in parsed:
            if field_name is None:
                continue
            # "title.upper" or "url[0]" still start with a field name
            base = field_name.split('.', 1)[0].split('[', 1)[0]
            if base not in FIELDS:
                raise ConfigError(
                    f"Unknown field {{{field_name}}} in format template",
                    hint=f"Available fields: {', '.join(FIELDS)}",
                )

    def render(self, item):
        try:
            return self.template.format(**_item_fields(item))
        except (ValueError, AttributeError, IndexError, KeyError, TypeError) as e:
            raise ConfigError(f"Cannot render format template {self.template!r}: {e}") from e
