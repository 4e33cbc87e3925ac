"""Graylog message field → Jira field mapping.

The mapping setting is a comma-separated list of ``graylog_field=jira_field``
pairs, e.g. ``source=customfield_10010,level=customfield_10011#i``.  A ``#i``
suffix on the Jira side marks a multi-value field: the value is sent as a
single-element list instead of a scalar.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Tuple, Union

from graylog_jira.context import AlertContext
from graylog_jira.utils.logger import log_debug

LIST_MARKER = "#i"

FieldValue = Union[str, List[str]]


def parse_mapping_spec(spec: Optional[str]) -> List[Tuple[str, str]]:
    """Parse the mapping setting into ordered ``(source, target)`` pairs.

    Empty segments are ignored; entries that do not split into exactly two
    non-blank parts are dropped.
    """
    pairs: List[Tuple[str, str]] = []
    for entry in (spec or "").split(","):
        parts = [part.strip() for part in entry.split("=")]
        parts = [part for part in parts if part]
        if len(parts) == 2:
            pairs.append((parts[0], parts[1]))
        elif entry.strip():
            log_debug("Dropping malformed field mapping entry", entry=entry)
    return pairs


def build_mapping(spec: Optional[str], context: AlertContext) -> Dict[str, FieldValue]:
    """Project representative-message fields onto Jira field names."""
    message = context.representative_message
    if not spec or message is None:
        return {}

    mapping: Dict[str, FieldValue] = {}
    for source, target in parse_mapping_spec(spec):
        raw = message.get_field(source)
        if raw is None:
            continue
        value = str(raw)
        if not value.strip():
            continue

        if target.endswith(LIST_MARKER):
            key = target[:-len(LIST_MARKER)].strip()
            if key:
                mapping[key] = [value]
        else:
            mapping[target] = value
    return mapping
