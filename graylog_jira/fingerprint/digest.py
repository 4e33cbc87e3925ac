"""Alert fingerprinting.

The digest identifies "the same underlying failure" across alert firings.
It is the MD5 of either the rendered hash pattern or, when no pattern is
configured (or it renders blank), the regex fragment of the representative
message.  An empty digest means deduplication is skipped for the alert.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional

from graylog_jira.context import AlertContext
from graylog_jira.fingerprint.extract import extract
from graylog_jira.templating.placeholders import FRAGMENT_PLACEHOLDER, PlaceholderEngine
from graylog_jira.utils.logger import log_debug, log_warning


@dataclass(frozen=True)
class FingerprintSpec:
    """How to derive the digest for an alert."""

    message_regex: Optional[str] = None
    hash_pattern: Optional[str] = None


def md5_hex(content: str) -> str:
    """Lowercase hex of the MD5 of ``content`` read as an unsigned integer.

    Leading zeros are not padded, so the result may be shorter than 32 chars.
    """
    digest = hashlib.md5(content.encode("utf-8")).digest()
    return format(int.from_bytes(digest, "big"), "x")


class FingerprintComputer:
    """Compute alert digests.  Stateless apart from the shared template engine."""

    def __init__(self, engine: PlaceholderEngine) -> None:
        self.engine = engine

    def fragment(self, spec: FingerprintSpec, context: AlertContext) -> str:
        message = context.representative_message
        if message is None or not spec.message_regex:
            return ""
        return extract(spec.message_regex, message.message) or ""

    def compute_digest(self, spec: FingerprintSpec, context: AlertContext) -> str:
        if context.representative_message is None:
            log_warning("Skipping fingerprint, alert did not provide a message",
                        stream_id=context.stream_id)
            return ""

        fragment = self.fragment(spec, context)

        content = ""
        if spec.hash_pattern:
            pattern = spec.hash_pattern.replace(FRAGMENT_PLACEHOLDER, fragment)
            content = self.engine.render(pattern, context, unescape_template=False)

        if not content.strip():
            content = fragment

        if not content.strip():
            log_warning("Skipped MD5 creation, hash content is empty. Check message_regex and the MD5 pattern.",
                        stream_id=context.stream_id)
            return ""

        digest = md5_hex(content)
        log_debug("Fingerprint computed", digest=digest, content_length=len(content))
        return digest
