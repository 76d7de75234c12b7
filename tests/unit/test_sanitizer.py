"""
Unit tests for table name sanitization
"""

import re
import pytest
from export.sanitizer import sanitize_sql_identifier

SAFE_IDENTIFIER = re.compile(r"^[\w\d_.]*$")


class TestSanitizeSqlIdentifier:
    """Test identifier sanitization"""

    def test_strips_space_and_punctuation(self):
        assert sanitize_sql_identifier("my table!") == "mytable"

    def test_keeps_underscore_digits_and_period(self):
        assert sanitize_sql_identifier("analytics.events_2021") == "analytics.events_2021"

    def test_removes_injection_attempt(self):
        result = sanitize_sql_identifier("events; DROP TABLE users; --")
        assert result == "eventsDROPTABLEusers"

    def test_removes_non_ascii_letters(self):
        assert sanitize_sql_identifier("évents") == "vents"

    def test_empty_input(self):
        assert sanitize_sql_identifier("") == ""

    @pytest.mark.parametrize("value", [
        "posthog_event",
        "my table!",
        "\"quoted\".\"name\"",
        "tab\tle\nname",
        "emoji_🚀_table",
        "$$$",
        "a-b-c",
    ])
    def test_output_is_safe_and_idempotent(self, value):
        once = sanitize_sql_identifier(value)
        assert SAFE_IDENTIFIER.match(once)
        assert sanitize_sql_identifier(once) == once
