# src/turnover_sla/rules/status_matcher.py
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Optional

from turnover_sla.models import RulesConfig

log = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _word_pattern(matcher: str) -> re.Pattern:
    # ASCII word boundaries ("shipped" hits "Shippedé"); callers lowercase
    # both sides so non-ASCII letters still compare case-insensitively.
    return re.compile(rf"\b{re.escape(matcher)}\b", re.ASCII)


@lru_cache(maxsize=64)
def _custom_pattern(pattern: str) -> Optional[re.Pattern]:
    """Compile the user regex; None when it is not a valid pattern."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as ex:
        log.debug("Ignoring invalid status regex %r: %s", pattern, ex)
        return None


def _matches_phrase(status: str, matcher: str) -> bool:
    m = (matcher or "").strip().lower()
    if not m:
        return False
    if status.strip().lower() == m:
        return True
    # whole-word, not plain substring: "shipped" must not hit "unshipped"
    return _word_pattern(m).search(status.lower()) is not None


def match_list(status: str, matchers) -> bool:
    return any(_matches_phrase(status, m) for m in matchers)


def match_status(status: str, rules: RulesConfig) -> bool:
    """
    True when the status satisfies the rule set.

    The phrase list always applies; a non-empty custom regex widens it
    (regex OR list), it never replaces it. Invalid regexes are ignored.
    """
    status = status or ""
    list_match = match_list(status, rules.status_matchers)
    if rules.status_regex:
        pattern = _custom_pattern(rules.status_regex)
        if pattern is not None:
            return pattern.search(status) is not None or list_match
    return list_match
