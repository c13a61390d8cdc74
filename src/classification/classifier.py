"""Rule-based classification of newsletter links."""

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlsplit

from src.enums import LinkType

logger = logging.getLogger(__name__)

JOB_PATTERN = re.compile(r"careers|jobs|greenhouse\.io|lever\.co")
ADVERTISER_PATTERN = re.compile(r"ads?|advertis")


@dataclass(frozen=True)
class LinkRule:
    """A single classification rule, applied to the lower-cased URL."""

    link_type: LinkType
    matches: Callable[[str], bool]
    name: str


def _is_pdf(url: str) -> bool:
    if url.endswith(".pdf") or "/pdf" in url:
        return True
    try:
        return urlsplit(url).path.endswith(".pdf")
    except ValueError:
        return False


def _has_utm_parameter(url: str) -> bool:
    try:
        query = urlsplit(url).query
    except ValueError:
        return False
    return any(key.startswith("utm") for key, _ in parse_qsl(query, keep_blank_values=True))


def _contains(*needles: str) -> Callable[[str], bool]:
    return lambda url: any(needle in url for needle in needles)


def _searches(pattern: re.Pattern[str]) -> Callable[[str], bool]:
    return lambda url: pattern.search(url) is not None


# Links with utm_* tracking parameters; left out of the standard rules
UTM_RULE = LinkRule(LinkType.ADVERTISER, _has_utm_parameter, "utm")

# Order encodes priority: the first matching rule wins.
CANONICAL_RULES: tuple[LinkRule, ...] = (
    LinkRule(LinkType.PDF, _is_pdf, "pdf"),
    LinkRule(LinkType.X, _contains("x.com", "twitter.com"), "x"),
    LinkRule(LinkType.REDDIT, _contains("reddit.com"), "reddit"),
    LinkRule(LinkType.JOB, _searches(JOB_PATTERN), "job"),
    LinkRule(LinkType.ADVERTISER, _searches(ADVERTISER_PATTERN), "advertiser"),
    UTM_RULE,
)

STANDARD_RULES: tuple[LinkRule, ...] = tuple(
    rule for rule in CANONICAL_RULES if rule is not UTM_RULE
)


class LinkClassifier:
    """Classifies URLs by evaluating an ordered rule table.

    Anything no rule matches is an article. Callers can narrow the
    behaviour by passing a subset of ``CANONICAL_RULES`` or with
    ``without`` and ``without_rules``.
    """

    def __init__(self, rules: Iterable[LinkRule] = CANONICAL_RULES) -> None:
        """Initialise the classifier.

        :param rules: Rules in priority order.
        """
        self._rules = tuple(rules)

    @property
    def rules(self) -> tuple[LinkRule, ...]:
        """The rules in priority order."""
        return self._rules

    def without(self, *link_types: LinkType) -> "LinkClassifier":
        """Build a classifier that no longer emits the given tags.

        :param link_types: Tags whose rules should be dropped.
        :returns: A new, narrower classifier.
        """
        return LinkClassifier(rule for rule in self._rules if rule.link_type not in link_types)

    def without_rules(self, *names: str) -> "LinkClassifier":
        """Build a classifier without the named rules.

        :param names: Names of the rules to drop.
        :returns: A new, narrower classifier.
        """
        return LinkClassifier(rule for rule in self._rules if rule.name not in names)

    def classify(self, url: str) -> LinkType:
        """Classify a URL.

        :param url: The raw URL.
        :returns: The tag of the first matching rule, else article.
        """
        lowered = url.lower()
        for rule in self._rules:
            if rule.matches(lowered):
                return rule.link_type
        return LinkType.ARTICLE


_default_classifier = LinkClassifier(STANDARD_RULES)


def classify_url(url: str) -> LinkType:
    """Classify a URL with the standard rules.

    These are the canonical rules without ``UTM_RULE``.

    :param url: The raw URL.
    :returns: The link type.
    """
    link_type = _default_classifier.classify(url)
    logger.debug(f"Classified {url} as {link_type}")
    return link_type
