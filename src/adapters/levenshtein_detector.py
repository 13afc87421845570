"""Default hostname matcher built on Levenshtein edit distance.

Domains are compared label by label from the TLD down, so a list entry also
covers all of its subdomains. Fuzzy matching compares only the last two
labels of each name, which catches look-alike registrations such as
``rnyetherwallet.com`` without flagging unrelated subdomains.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from Levenshtein import distance

from core.models import ClassificationConfig, DetectionResult

DomainParts = Tuple[str, ...]


def domain_to_parts(domain: str) -> DomainParts:
    """Split a domain into lower-cased labels, TLD first."""

    return tuple(reversed(domain.strip().lower().rstrip(".").split(".")))


def parts_to_domain(parts: DomainParts) -> str:
    return ".".join(reversed(parts))


def parts_to_fuzzy_form(parts: DomainParts) -> str:
    """Return the last two labels of a domain, without a leading www."""

    fuzzy = parts_to_domain(parts[:2])
    if fuzzy.startswith("www."):
        fuzzy = fuzzy[len("www."):]
    return fuzzy


def match_parts_against_list(source: DomainParts, targets: Sequence[DomainParts]) -> Optional[DomainParts]:
    """Return the first target equal to source or one of its parent domains."""

    for target in targets:
        if len(target) > len(source):
            continue
        if source[: len(target)] == target:
            return target
    return None


def _prepare(domains: Sequence[str]) -> List[DomainParts]:
    return [domain_to_parts(domain) for domain in domains if domain.strip()]


class PhishingDetector:
    """Precomputed whitelist, blacklist and fuzzylist lookups for one config."""

    def __init__(self, config: ClassificationConfig) -> None:
        self.tolerance = config.tolerance
        self._whitelist = _prepare(config.whitelist)
        self._blacklist = _prepare(config.blacklist)
        self._fuzzylist = [(parts, parts_to_fuzzy_form(parts)) for parts in _prepare(config.fuzzylist)]

    def check(self, hostname: str) -> DetectionResult:
        """Classify a hostname.

        Order of precedence:
        - whitelisted domains (or their subdomains) are never phishing
        - blacklisted domains (or their subdomains) always are
        - with a positive tolerance, names within that edit distance of a
          fuzzylist entry are flagged
        """

        source = domain_to_parts(hostname)

        whitelisted = match_parts_against_list(source, self._whitelist)
        if whitelisted:
            return DetectionResult(result=False, type="whitelist", match=parts_to_domain(whitelisted))

        blacklisted = match_parts_against_list(source, self._blacklist)
        if blacklisted:
            return DetectionResult(result=True, type="blacklist", match=parts_to_domain(blacklisted))

        if self.tolerance > 0:
            fuzzy_form = parts_to_fuzzy_form(source)
            for parts, target in self._fuzzylist:
                if distance(fuzzy_form, target) <= self.tolerance:
                    return DetectionResult(result=True, type="fuzzy", match=parts_to_domain(parts))

        return DetectionResult(result=False, type="all")
