import keyword
import re
import unicodedata
from urllib.parse import urlparse

__all__ = ('is_url', 'sanitize_attribute_name', 'sanitize_name_python_keywords')


def is_url(text):
    try:
        result = urlparse(text)
        return all([result.scheme, result.netloc])
    except (ValueError, AttributeError):
        return False


def remove_accents(input_str):
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return ''.join(c for c in nfkd_form if not unicodedata.combining(c))


def sanitize_name_python_keywords(name: str) -> str:
    if keyword.iskeyword(name):
        return f'{name}_'
    return name


def sanitize_attribute_name(name: str) -> str:
    """Sanitize argument and module names to be valid Python identifiers.

    - Replace spaces, dots and hyphens with underscores
    - Remove other invalid characters
    - Ensure it doesn't start with a digit
    - Suffix Python keywords with an underscore
    """
    if not name:
        raise ValueError('Name cannot be empty')

    sanitized = re.sub(r'[-.\s]+', '_', remove_accents(name))
    sanitized = re.sub(r'[^A-Za-z0-9_]', '', sanitized)
    if not sanitized:
        raise ValueError(f"'{name}' has no valid identifier characters")

    if sanitized[0].isdigit():
        sanitized = '_' + sanitized
    return sanitize_name_python_keywords(sanitized)
