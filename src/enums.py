"""Central enum definitions for the project."""

from enum import StrEnum


class LinkType(StrEnum):
    """Classification tag for a URL found in a newsletter."""

    PDF = "pdf"
    X = "x"
    REDDIT = "reddit"
    JOB = "job"
    ADVERTISER = "advertiser"
    ARTICLE = "article"


class ContentType(StrEnum):
    """Length tier of extracted content, derived from its word count."""

    ARTICLE = "article"
    SHORT_FORM = "short-form"
    MINIMAL = "minimal"
