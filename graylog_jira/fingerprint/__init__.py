"""Regex extraction and MD5 fingerprinting of alert content."""

from graylog_jira.fingerprint.digest import FingerprintComputer, FingerprintSpec, md5_hex
from graylog_jira.fingerprint.extract import capture_group, extract, replace_named_groups

__all__ = [
    "FingerprintComputer",
    "FingerprintSpec",
    "md5_hex",
    "capture_group",
    "extract",
    "replace_named_groups",
]
