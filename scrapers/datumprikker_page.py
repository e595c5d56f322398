"""Extract the event summary from a datumprikker.nl event-overview page."""
from __future__ import annotations

from typing import Optional

from ingest.schemas import DateRange, Event

from scrapers.markup import And, Attr, Class, Document, Name
from scrapers.utils import parse_rfc3339

# Root element id of the home page the site serves for unknown events
NON_EXISTING_PAGE_ID = "page_home_index"


class ParsePageError(Exception):
    """Base class for failures while extracting an event page."""


class NonExistingEvent(ParsePageError):
    """The requested event does not exist."""

    def __init__(self, message: str = "the requested event is non-existing"):
        super().__init__(message)


class UnexpectedMarkup(ParsePageError):
    """The page does not follow the expected structure."""

    def __init__(self, message: str = "parsed html is not following the expected format"):
        super().__init__(message)


class DateParseError(ParsePageError):
    """A date attribute is present but is not a valid timestamp."""

    def __init__(self, message: str = "parsed html has a date in an unexpected format"):
        super().__init__(message)


def parse_page(text: str) -> Event:
    """Parse the markup of an event-overview page into an :class:`Event`.

    Raises:
        NonExistingEvent: The site answered with its home page instead.
        UnexpectedMarkup: A required element or attribute is missing.
        DateParseError: The final date could not be parsed.
    """
    return parse_document(Document.from_text(text))


def parse_document(document: Document) -> Event:
    """Same as :func:`parse_page` for an already parsed document."""
    if _parse_page_id(document) == NON_EXISTING_PAGE_ID:
        raise NonExistingEvent()

    canonical_url = _parse_canonical_url(document)
    title = _parse_title(document)
    final_date = _parse_final_date(document)
    open_registration_link = _parse_open_registration_link(document)

    return Event(
        canonical_url=canonical_url,
        title=title,
        final_date=final_date,
        open_registration_link=open_registration_link,
    )


def _required(value: Optional[str]) -> str:
    if value is None:
        raise UnexpectedMarkup()
    return value


def _article_attr(document: Document, name: str) -> str:
    article = document.find(Name("article"))
    if article is None:
        raise UnexpectedMarkup()
    return _required(article.attr(name))


def _parse_page_id(document: Document) -> str:
    root = document.find(Name("html"))
    if root is None:
        raise UnexpectedMarkup()
    return _required(root.attr("id"))


def _parse_canonical_url(document: Document) -> str:
    link = document.find(And(Name("link"), Attr("rel", "canonical")))
    if link is None:
        raise UnexpectedMarkup()
    return _required(link.attr("href"))


def _parse_title(document: Document) -> str:
    return _article_attr(document, "data-event-title")


def _parse_final_date(document: Document) -> Optional[DateRange]:
    final_summary = document.find(Attr("id", "final_summary"))
    if final_summary is None:
        return None

    date = final_summary.find(Class("date"))
    if date is None:
        raise UnexpectedMarkup()

    start_text = _required(date.attr("data-startdate"))
    end_text = _required(date.attr("data-enddate"))

    try:
        start = parse_rfc3339(start_text)
        end = parse_rfc3339(end_text)
    except ValueError as exc:
        raise DateParseError() from exc

    return DateRange(start=start, end=end)


def _parse_open_registration_link(document: Document) -> Optional[str]:
    link = _article_attr(document, "data-openregistration-link")
    return link or None
