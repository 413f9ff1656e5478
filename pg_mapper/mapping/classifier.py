"""Field classification.

Reduces a field's directives to exactly one Classification:

- ``ignore`` wins outright, wherever it appears.
- ``flatten`` applies only while the field is still undefined.
- ``collection`` overrides anything but ``ignore``.
- Anything else resets the field to a plain mapped field.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pg_mapper.core.enums import Classification
from pg_mapper.core.exceptions import UnknownFieldAttributeError
from pg_mapper.mapping.attributes import Directive

logger = logging.getLogger(__name__)

IGNORE = "ignore"
FLATTEN = "flatten"
COLLECTION = "collection"

FIELD_KEYWORDS = frozenset({IGNORE, FLATTEN, COLLECTION})


def classify(
    directives: Sequence[Directive],
    *,
    strict: bool = False,
    field: str | None = None,
) -> Classification:
    """Classify a field from its parsed directives.

    Args:
        directives: Directives parsed from the field's pg_mapper markers.
        strict: Raise on unrecognized directives instead of falling back.
        field: Qualified field name for diagnostics.

    Raises:
        UnknownFieldAttributeError: In strict mode, for a directive outside
            ``ignore``, ``flatten`` and ``collection``.
    """
    if any(directive.keyword == IGNORE for directive in directives):
        return Classification.IGNORED

    state = Classification.UNDEFINED
    for directive in directives:
        if directive.keyword == FLATTEN:
            if state is Classification.UNDEFINED:
                state = Classification.FLATTENED
        elif directive.keyword == COLLECTION:
            state = Classification.COLLECTION
        else:
            if strict:
                raise UnknownFieldAttributeError(field or "<field>", directive.describe())
            logger.warning(
                "Unrecognized pg_mapper directive %s on %s; mapping it as a plain column",
                directive.describe(),
                field or "<field>",
            )
            return Classification.UNDEFINED

    return state
