"""SEO lint report over the post corpus

Findings are advisory: nothing here modifies content.
"""

from pathlib import Path

from blogpub.core.frontmatter import decode
from blogpub.core.models import RawDocument, SEOIssue, SEOReport
from blogpub.core.utils.dates import parse_date
from blogpub.core.utils.text import images_without_alt
from blogpub.util.fs import write_json


TITLE_MAX = 60
EXCERPT_MIN = 50
EXCERPT_MAX = 160


def _text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def check_document(doc: RawDocument, report: SEOReport) -> None:
    """Append the issues found in one document to report and update its counters."""
    metadata, body = decode(doc.text)

    def issue(kind: str, message: str, suggestion: str | None = None) -> None:
        report.issues.append(SEOIssue(type=kind, file=doc.path, message=message, suggestion=suggestion))

    if _text(metadata.get("image")):
        report.posts_with_images += 1

    excerpt = _text(metadata.get("excerpt"))
    if not excerpt:
        report.posts_without_excerpt += 1
        issue("warning", "Missing excerpt/description", "Add excerpt in frontmatter for better SEO")
    elif len(excerpt) < EXCERPT_MIN:
        issue("info", f"Excerpt too short ({len(excerpt)} chars, recommended: 120-{EXCERPT_MAX})",
              "Expand excerpt for better search result snippets")
    elif len(excerpt) > EXCERPT_MAX:
        issue("warning", f"Excerpt too long ({len(excerpt)} chars, recommended: 120-{EXCERPT_MAX})",
              "Trim excerpt to optimal length")

    if not metadata.get("tags"):
        report.posts_without_tags += 1
        issue("warning", "Missing tags", "Add tags in frontmatter for better categorization")

    title = _text(metadata.get("title"))
    if len(title) > TITLE_MAX:
        issue("warning", f"Title too long ({len(title)} chars, recommended: <{TITLE_MAX})",
              "Keep titles concise for better SEO")

    date = _text(metadata.get("date"))
    if not date:
        report.posts_with_bad_dates += 1
        issue("warning", "Missing date", "Add an ISO-8601 date (yyyy-mm-dd); the post sorts as newest until then")
    elif parse_date(date) is None:
        report.posts_with_bad_dates += 1
        issue("warning", f"Unparsable date {date!r}",
              "Use ISO-8601 (yyyy-mm-dd); the post sorts as newest until fixed")

    missing_alt = images_without_alt(body)
    if missing_alt:
        report.images_without_alt += missing_alt
        issue("warning", f"Found {missing_alt} image(s) without alt text",
              "Add descriptive alt text to all images for accessibility and SEO")


def check_documents(documents: list[RawDocument], total: int | None = None) -> SEOReport:
    """Lint every document; per-document failures become error issues."""
    report = SEOReport(total_posts=len(documents) if total is None else total)
    for doc in documents:
        try:
            check_document(doc, report)
        except Exception as e:
            report.issues.append(SEOIssue(type="error", file=doc.path, message=f"Error processing file: {e}"))

    if report.posts_without_excerpt:
        report.recommendations.append(f"Add excerpts to {report.posts_without_excerpt} posts for better SEO")
    if report.posts_without_tags:
        report.recommendations.append(f"Add tags to {report.posts_without_tags} posts for better categorization")
    if report.images_without_alt:
        report.recommendations.append(f"Add alt text to {report.images_without_alt} images for accessibility and SEO")
    if report.posts_with_bad_dates:
        report.recommendations.append(f"Fix dates on {report.posts_with_bad_dates} posts so they sort correctly")
    return report


def write_report(path: Path, report: SEOReport) -> None:
    write_json(path, report.model_dump(by_alias=True))
