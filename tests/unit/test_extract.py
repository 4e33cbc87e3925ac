"""Unit tests for regex extraction (graylog_jira/fingerprint/extract.py)."""

import pytest
from unittest.mock import patch

from graylog_jira.fingerprint.extract import (
    capture_group,
    compile_pattern,
    extract,
    placeholder_names,
    replace_named_groups,
)

pytestmark = pytest.mark.unit


class TestExtract:
    """The fragment runs from the start of the first match to the end of the text."""

    def test_returns_tail_from_match_start(self):
        assert extract("ERROR: (.+)", "2024 ERROR: disk full") == "ERROR: disk full"

    def test_tail_includes_text_after_match(self):
        assert extract("ERROR", "boot ERROR then more") == "ERROR then more"

    def test_first_match_wins(self):
        assert extract("ERROR", "a ERROR b ERROR c") == "ERROR b ERROR c"

    def test_no_match(self):
        assert extract("FATAL", "2024 ERROR: disk full") is None

    def test_empty_pattern(self):
        assert extract("", "anything") is None
        assert extract(None, "anything") is None

    def test_no_text(self):
        assert extract("ERROR", None) is None

    def test_invalid_pattern_does_not_raise(self):
        assert extract("(unclosed", "(unclosed text") is None

    def test_exception_example_pattern(self):
        text = "at line 3 java.lang.IllegalStateException: queue full"

        assert extract(r"([a-zA-Z_.]+(?!.*Exception): .+)", text) == "java.lang.IllegalStateException: queue full"


class TestCompilePattern:
    """User patterns may use (?<name>...) groups."""

    def test_java_named_group_translated(self):
        compiled = compile_pattern(r"user=(?<user>\w+)")

        assert compiled is not None
        assert "user" in compiled.groupindex

    def test_lookbehind_untouched(self):
        compiled = compile_pattern(r"(?<=id=)\d+")

        assert compiled.search("id=42").group(0) == "42"

    def test_invalid_returns_none(self):
        assert compile_pattern("[") is None


class TestNamedGroups:
    """${name} placeholders are filled from named groups of the first match."""

    def test_capture_group(self):
        assert capture_group(r"code=(?P<code>\d+)", "x code=503 y", "code") == "503"

    def test_capture_group_unknown_name(self):
        assert capture_group(r"code=(?P<code>\d+)", "code=503", "other") is None

    def test_capture_group_non_participating(self):
        assert capture_group(r"(?P<a>x)|(?P<b>y)", "y", "a") is None

    def test_placeholder_names(self):
        assert placeholder_names("${svc} failed: ${code} ${svc}") == ["code", "svc"]

    def test_replace_named_groups(self):
        result = replace_named_groups(
            "[${svc}] HTTP ${code}",
            "svc=orders status=503",
            r"svc=(?<svc>\w+) status=(?<code>\d+)",
        )

        assert result == "[orders] HTTP 503"

    def test_missing_group_left_as_is(self):
        result = replace_named_groups("${svc} ${nope}", "svc=orders", r"svc=(?P<svc>\w+)")

        assert result == "orders ${nope}"

    def test_no_match_leaves_template(self):
        assert replace_named_groups("${svc}", "nothing here", r"svc=(?P<svc>\w+)") == "${svc}"

    def test_invalid_pattern_warns_once(self):
        with patch("graylog_jira.fingerprint.extract.log_warning") as mock_warn:
            result = replace_named_groups("${a} ${b} ${c}", "text", "(?<a>[")

        assert result == "${a} ${b} ${c}"
        mock_warn.assert_called_once()

    def test_pattern_compiled_once(self):
        with patch("graylog_jira.fingerprint.extract.compile_pattern",
                   wraps=compile_pattern) as mock_compile:
            result = replace_named_groups("${a}-${b}", "1 2", r"(?<a>\d) (?<b>\d)")

        assert result == "1-2"
        assert mock_compile.call_count == 1
