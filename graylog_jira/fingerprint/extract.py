"""Regex extraction from message bodies.

Patterns come from user configuration, so nothing here raises: a pattern
that does not compile or does not match yields ``None`` and a warning.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern

from graylog_jira.utils.logger import log_warning

# Graylog (Java) named groups: (?<name>...), but not look-behind (?<= / (?<!
_RE_JAVA_GROUP = re.compile(r"\(\?<(?![=!])([A-Za-z][A-Za-z0-9]*)>")
_RE_NAMED_PLACEHOLDER = re.compile(r"\$\{([a-zA-Z0-9_-]+)\}")


def compile_pattern(pattern: str) -> Optional[Pattern[str]]:
    """Compile a user-supplied pattern, accepting ``(?<name>...)`` groups."""
    try:
        return re.compile(_RE_JAVA_GROUP.sub(r"(?P<\1>", pattern))
    except re.error as e:
        log_warning("Invalid message regex, no fragment extracted", pattern=pattern, error=str(e))
        return None


def extract(pattern: Optional[str], text: Optional[str]) -> Optional[str]:
    """Return ``text`` from the start of the first match to its end.

    The whole tail is returned, not only the matched span, so that templates
    receive everything after a recognizable prefix.
    """
    if not pattern or text is None:
        return None
    compiled = compile_pattern(pattern)
    if compiled is None:
        return None
    match = compiled.search(text)
    if match is None:
        return None
    return text[match.start():]


def capture_group(pattern: Optional[str], text: Optional[str], name: str) -> Optional[str]:
    """Return the named group ``name`` of the first match, if it took part."""
    if not pattern or text is None or not name:
        return None
    compiled = compile_pattern(pattern)
    if compiled is None or name not in compiled.groupindex:
        return None
    match = compiled.search(text)
    if match is None:
        return None
    return match.group(name)


def placeholder_names(template: str) -> list[str]:
    """Distinct ``${name}`` placeholders in ``template``."""
    return sorted(set(_RE_NAMED_PLACEHOLDER.findall(template or "")))


def replace_named_groups(template: str, text: Optional[str], pattern: Optional[str]) -> str:
    """Replace each ``${name}`` in ``template`` with that group of the first match.

    Placeholders whose group is missing or did not participate are left as-is.
    The pattern is compiled and matched once for all placeholders.
    """
    names = placeholder_names(template)
    if not names or not pattern or text is None:
        return template
    compiled = compile_pattern(pattern)
    if compiled is None:
        return template
    match = compiled.search(text)
    if match is None:
        return template

    result = template
    for name in names:
        if name not in compiled.groupindex:
            continue
        captured = match.group(name)
        if captured is not None:
            result = result.replace("${" + name + "}", captured)
    return result
