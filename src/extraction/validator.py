"""Quality scoring for parsed content."""

from src.extraction.models import UNKNOWN_LANGUAGE, ParsedContent, ValidationReport

MIN_TITLE_LENGTH = 11
FULL_CONTENT_MIN_WORDS = 101
LOW_CONTENT_MIN_WORDS = 21

TITLE_POINTS = 30
FULL_CONTENT_POINTS = 40
LOW_CONTENT_POINTS = 20
AUTHOR_POINTS = 10
PUBLISH_DATE_POINTS = 5
SUMMARY_POINTS = 5
SOURCE_URL_POINTS = 5
LANGUAGE_POINTS = 5


def validate_parsed_content(parsed: ParsedContent) -> ValidationReport:
    """Score a parsed result out of 100 and explain what is missing.

    Title is worth 30, content 40, metadata 20 and structure 10. Each issue
    is paired with a suggestion at the same index.

    :param parsed: The parsed content to score.
    :returns: The validation report.
    """
    issues: list[str] = []
    suggestions: list[str] = []
    score = 0

    if parsed.title:
        if len(parsed.title) >= MIN_TITLE_LENGTH:
            score += TITLE_POINTS
        else:
            issues.append("Title too short")
            suggestions.append("Check if title extraction is working correctly")
    else:
        issues.append("No title found")
        suggestions.append("Verify HTML structure and meta tags")

    if parsed.content:
        if parsed.word_count >= FULL_CONTENT_MIN_WORDS:
            score += FULL_CONTENT_POINTS
        elif parsed.word_count >= LOW_CONTENT_MIN_WORDS:
            score += LOW_CONTENT_POINTS
            issues.append("Low content volume")
            suggestions.append("Check if main content extraction is working")
        else:
            issues.append("Very little content extracted")
            suggestions.append("Verify content selectors and parsing logic")
    else:
        issues.append("No content found")
        suggestions.append("Check HTML structure and content selectors")

    if parsed.author:
        score += AUTHOR_POINTS
    if parsed.publish_date:
        score += PUBLISH_DATE_POINTS
    if parsed.summary:
        score += SUMMARY_POINTS

    if parsed.source_url:
        score += SOURCE_URL_POINTS
    if parsed.language != UNKNOWN_LANGUAGE:
        score += LANGUAGE_POINTS

    return ValidationReport(score=score, issues=issues, suggestions=suggestions)
