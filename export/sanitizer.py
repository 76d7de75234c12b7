"""
SQL identifier sanitization for the configured table name
"""

import re

# Anything outside ASCII word characters and "." is dropped
_DISALLOWED_IDENTIFIER_CHARS = re.compile(r"[^\w\d_.]+", re.ASCII)


def sanitize_sql_identifier(unquoted_identifier: str) -> str:
    """
    Strip characters that could break out of an unquoted identifier.

    >>> sanitize_sql_identifier("my table!")
    'mytable'
    """
    return _DISALLOWED_IDENTIFIER_CHARS.sub("", unquoted_identifier or "")
