import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ingest.schemas import DateRange, Event
from scrapers.datumprikker_page import (
    DateParseError,
    NonExistingEvent,
    ParsePageError,
    UnexpectedMarkup,
    parse_page,
)

TEST_DATA = os.path.join(os.path.dirname(__file__), "test_data")


def load_snapshot(name):
    with open(os.path.join(TEST_DATA, name), "r", encoding="utf-8") as f:
        return f.read()


def make_page(
    page_id="page_afspraak_overzicht",
    canonical='<link rel="canonical" href="http://datumprikker.nl/afspraak/overzicht/abc">',
    article_attrs='data-event-title="Board games" data-openregistration-link=""',
    final_summary="",
):
    """Build a minimal event-overview page."""
    html_id = f' id="{page_id}"' if page_id is not None else ""
    return (
        f"<html{html_id}><head>{canonical}</head><body>"
        f"<article {article_attrs}>{final_summary}</article>"
        "</body></html>"
    )


def final_summary_block(start='data-startdate="2022-06-03T19:00:00+02:00"',
                        end='data-enddate="2022-06-03T23:00:00+02:00"'):
    return f'<section id="final_summary"><div class="date" {start} {end}></div></section>'


def test_in_progress_event():
    event = parse_page(load_snapshot("afspraak_overzicht_in_progress.html"))
    assert event == Event(
        canonical_url="http://datumprikker.nl/afspraak/overzicht/fewqvuycnmvgnx25",
        title="D&D Avernus week 29",
        final_date=None,
        open_registration_link="https://datumprikker.nl/pux6s6a4febgnx25",
    )


def test_finalized_event():
    event = parse_page(load_snapshot("afspraak_overzicht_finalized.html"))
    assert event == Event(
        canonical_url="http://datumprikker.nl/afspraak/overzicht/f4wfumjp7a9ih2nq",
        title="D&D Avernus Week 22",
        final_date=DateRange(
            start=datetime(2022, 6, 3, 17, 0, 0, tzinfo=timezone.utc),
            end=datetime(2022, 6, 3, 21, 0, 0, tzinfo=timezone.utc),
        ),
        open_registration_link="https://datumprikker.nl/pbxzxuf7c8sih2nq",
    )
    assert event.final_date.start.tzinfo == timezone.utc
    # Same instant as the source value
    assert event.final_date.start == datetime(
        2022, 6, 3, 19, 0, 0, tzinfo=timezone(timedelta(hours=2))
    )


def test_participant_event():
    event = parse_page(load_snapshot("afspraak_overzicht_participant.html"))
    assert event == Event(
        canonical_url="http://datumprikker.nl/afspraak/overzicht/mu2edbyv3bfayubtm",
        title="test",
        final_date=None,
        open_registration_link=None,
    )


def test_invalid_event():
    with pytest.raises(NonExistingEvent):
        parse_page(load_snapshot("afspraak_overzicht_invalid.html"))


def test_home_page_wins_over_missing_elements():
    # The home page has no article; the page id check comes first
    with pytest.raises(NonExistingEvent):
        parse_page('<html id="page_home_index"><body></body></html>')


def test_unknown_page_id_is_accepted():
    event = parse_page(make_page(page_id="page_something_new"))
    assert event.title == "Board games"


def test_minimal_page():
    event = parse_page(make_page())
    assert event.canonical_url == "http://datumprikker.nl/afspraak/overzicht/abc"
    assert event.final_date is None
    assert event.open_registration_link is None


def test_registration_link_is_returned_verbatim():
    event = parse_page(make_page(
        article_attrs='data-event-title="x" data-openregistration-link="https://datumprikker.nl/p 1"'
    ))
    assert event.open_registration_link == "https://datumprikker.nl/p 1"


def test_missing_page_id():
    with pytest.raises(UnexpectedMarkup):
        parse_page(make_page(page_id=None))


@pytest.mark.parametrize(
    "canonical",
    [
        "",
        '<link rel="stylesheet" href="http://datumprikker.nl/site.css">',
        '<link rel="canonical">',
        '<a rel="canonical" href="http://datumprikker.nl/afspraak/overzicht/abc"></a>',
    ],
)
def test_canonical_link_problems(canonical):
    with pytest.raises(UnexpectedMarkup):
        parse_page(make_page(canonical=canonical))


@pytest.mark.parametrize(
    "article_attrs",
    [
        'data-openregistration-link=""',
        'data-title="Board games" data-openregistration-link=""',
        'data-event-title="Board games"',
    ],
)
def test_article_attribute_problems(article_attrs):
    with pytest.raises(UnexpectedMarkup):
        parse_page(make_page(article_attrs=article_attrs))


def test_missing_article():
    page = (
        '<html id="page_afspraak_overzicht"><head>'
        '<link rel="canonical" href="http://datumprikker.nl/afspraak/overzicht/abc">'
        '</head><body><div data-event-title="x"></div></body></html>'
    )
    with pytest.raises(UnexpectedMarkup):
        parse_page(page)


def test_final_date_in_utc():
    event = parse_page(make_page(final_summary=final_summary_block(
        start='data-startdate="2022-12-31T23:30:00-01:00"',
        end='data-enddate="2023-01-01T01:00:00Z"',
    )))
    assert event.final_date == DateRange(
        start=datetime(2023, 1, 1, 0, 30, tzinfo=timezone.utc),
        end=datetime(2023, 1, 1, 1, 0, tzinfo=timezone.utc),
    )


def test_final_date_order_is_not_checked():
    event = parse_page(make_page(final_summary=final_summary_block(
        start='data-startdate="2022-06-03T23:00:00+02:00"',
        end='data-enddate="2022-06-03T19:00:00+02:00"',
    )))
    assert event.final_date.start > event.final_date.end


def test_final_summary_without_date_element():
    with pytest.raises(UnexpectedMarkup):
        parse_page(make_page(final_summary='<section id="final_summary"><div></div></section>'))


@pytest.mark.parametrize("missing", ["start", "end"])
def test_final_summary_missing_date_attribute(missing):
    block = final_summary_block(**{missing: ""})
    with pytest.raises(UnexpectedMarkup):
        parse_page(make_page(final_summary=block))


@pytest.mark.parametrize(
    "start,end",
    [
        ('data-startdate="yesterday"', 'data-enddate="2022-06-03T23:00:00+02:00"'),
        ('data-startdate="2022-06-03T19:00:00+02:00"', 'data-enddate="2022-06-03"'),
        ('data-startdate="2022-06-03T19:00:00"', 'data-enddate="2022-06-03T23:00:00+02:00"'),
        ('data-startdate="2022-13-03T19:00:00+02:00"', 'data-enddate="2022-06-03T23:00:00+02:00"'),
        ('data-startdate="2022-06-03T19:00:00+02:00&#10;"', 'data-enddate="2022-06-03T23:00:00+02:00"'),
        ('data-startdate="2022-06-03T19:00:00+02:00"', 'data-enddate="2022-06-0&#x663;T23:00:00+02:00"'),
    ],
)
def test_final_date_parse_error(start, end):
    with pytest.raises(DateParseError) as excinfo:
        parse_page(make_page(final_summary=final_summary_block(start=start, end=end)))
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_error_kinds_are_distinct():
    assert issubclass(NonExistingEvent, ParsePageError)
    assert issubclass(UnexpectedMarkup, ParsePageError)
    assert issubclass(DateParseError, ParsePageError)
    assert not issubclass(DateParseError, UnexpectedMarkup)
    assert not issubclass(NonExistingEvent, UnexpectedMarkup)


def test_event_is_immutable():
    event = parse_page(make_page())
    with pytest.raises(AttributeError):
        event.title = "changed"


def test_final_date_leap_second():
    event = parse_page(make_page(final_summary=final_summary_block(
        start='data-startdate="2016-12-31T23:00:00Z"',
        end='data-enddate="2016-12-31T23:59:60Z"',
    )))
    assert event.final_date.end == datetime(2016, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)
