"""Naming policy for generated identifiers.

Every identifier the generator derives from a catalog name goes through
one of these functions, so each rule can be tested in isolation.
"""

import logging
import re

from callgen.codegen.utils import sanitize_name_python_keywords

__all__ = ('camelize', 'singularize', 'to_snake_case')

logger = logging.getLogger(__name__)

SEPARATORS = frozenset('._')


def camelize(name: str) -> str:
    """Convert a dotted/underscored identifier to PascalCase.

    The first character and every character following a ``.`` or ``_`` is
    upper-cased and the separators are dropped. Interior characters are
    left untouched.

    Examples:
        >>> camelize('chat.postMessage')
        'ChatPostMessage'
        >>> camelize('a_b.c')
        'ABC'
    """
    chars = []
    upper_next = True
    for char in name:
        if char in SEPARATORS:
            upper_next = True
            continue
        chars.append(char.upper() if upper_next else char)
        upper_next = False
    return ''.join(chars)


def singularize(name: str, override: str = '') -> str:
    """Return the singular form of a list argument name.

    A trailing ``es`` is stripped, otherwise a trailing ``s``. ``override``
    wins when given.
    """
    if override:
        return override
    if name.endswith('es'):
        return name[:-2]
    if name.endswith('s'):
        return name[:-1]
    logger.debug(f"'{name}' has no plural suffix, using it as its own singular")
    return name


_ACRONYM_BOUNDARY = re.compile(r'([A-Z]+)([A-Z][a-z])')
_WORD_BOUNDARY = re.compile(r'([a-z0-9])([A-Z])')


def to_snake_case(name: str) -> str:
    """Convert a PascalCase or camelCase identifier to snake_case.

    Examples:
        >>> to_snake_case('PostMessage')
        'post_message'
        >>> to_snake_case('getHTTPStatus')
        'get_http_status'
    """
    name = re.sub(r'[.\-\s]+', '_', name)
    name = _ACRONYM_BOUNDARY.sub(r'\1_\2', name)
    name = _WORD_BOUNDARY.sub(r'\1_\2', name)
    return sanitize_name_python_keywords(re.sub(r'_+', '_', name).lower())
