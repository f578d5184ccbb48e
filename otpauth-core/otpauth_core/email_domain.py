"""
Email Domain Validation
=======================
Allow-list matching of email domains against an operator glob.

Glob policy:
- ``*`` matches any run of characters other than ``/``
- ``?`` matches exactly one such character
- every other character is literal: no braces, negation, alternation,
  character classes or extglobs
- matching is case-sensitive against the configured pattern
"""

import re
from typing import Pattern

from email_validator import EmailNotValidError, validate_email


def compile_domain_glob(pattern: str) -> Pattern[str]:
    """Translate a wildcard-only glob into an anchored regex."""
    parts = []
    for char in pattern:
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


def normalize_email(email: str) -> str:
    """Canonical cache key form of an email."""
    return email.strip().lower()


def mask_email(email: str) -> str:
    """
    Mask an email for logging.

    Keeps the first character of the local part and the whole domain.
    """
    local, sep, domain = email.rpartition("@")
    if not sep or not local:
        return "***"
    return f"{local[0]}***@{domain}"


class EmailDomainValidator:
    """
    Immutable allow-list check for email addresses.

    Build a new instance to change the pattern.
    """

    __slots__ = ("_pattern", "_regex")

    def __init__(self, pattern: str):
        object.__setattr__(self, "_pattern", pattern)
        object.__setattr__(self, "_regex", compile_domain_glob(pattern))

    def __setattr__(self, name, value):
        raise AttributeError("EmailDomainValidator is immutable")

    @property
    def pattern(self) -> str:
        return self._pattern

    def is_allowed(self, email: str) -> bool:
        """
        Check that email is well-formed and its domain matches the pattern.

        Args:
            email: Raw, unvalidated email string

        Returns:
            False for malformed addresses or non-matching domains
        """
        if not isinstance(email, str) or not email:
            return False
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return False
        # Match on the domain as given, not the library's lower-cased form
        domain = email.rsplit("@", 1)[1]
        return self._regex.fullmatch(domain) is not None
