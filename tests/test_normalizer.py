import logging

import pytest

from workreport.normalizer import MalformedRecordError, normalize_page, normalize_records

from conftest import make_page


def test_single_assignee(directory):
    page = make_page(
        title="  API 설계 ",
        customer="ACME",
        progress=0.456,
        end="2025-10-03",
        effort=2.5,
        pms=1234,
        pms_link="https://pms.example.com/1234",
    )

    (record,) = normalize_page(page, directory)

    assert record.title == "API 설계"
    assert record.customer == "ACME"
    assert record.person == "A"
    assert record.progress_rate == 45.6
    assert record.date.start == "2025-10-02"
    assert record.date.end == "2025-10-03"
    assert record.effort == 2.5
    assert record.external_id == 1234
    assert record.external_link == "https://pms.example.com/1234"
    assert record.is_today and not record.is_tomorrow


def test_multi_assignee_fans_out_into_independent_copies(directory):
    page = make_page(people=("a@example.com", "b@example.com"), effort=3)

    records = normalize_page(page, directory)

    assert [r.person for r in records] == ["A", "B"]
    assert all(r.effort == 3 for r in records)

    records[0].date.start = "2000-01-01"
    records[0].title = "changed"
    assert records[1].date.start == "2025-10-02"
    assert records[1].title == "Task"


def test_unknown_assignee_keeps_identity(directory):
    (record,) = normalize_page(make_page(people=("new@example.com",)), directory)
    assert record.person == "new@example.com"


def test_no_assignee_yields_incomplete_record(directory):
    (record,) = normalize_page(make_page(people=()), directory)
    assert record.person == ""
    assert not record.is_complete


@pytest.mark.parametrize("raw, expected", [(1.5, 100.0), (-0.2, 0.0), (None, 0.0), (1, 100.0)])
def test_progress_is_clamped(directory, raw, expected):
    (record,) = normalize_page(make_page(progress=raw), directory)
    assert record.progress_rate == expected


def test_effort_falls_back_to_man_day(directory):
    page = make_page(effort=None)
    page["properties"]["ManDay"] = {"number": 0.5}

    (record,) = normalize_page(page, directory)

    assert record.effort == 0.5


def test_missing_required_property_is_malformed(directory):
    page = make_page()
    del page["properties"]["Group"]

    with pytest.raises(MalformedRecordError):
        normalize_page(page, directory)

    with pytest.raises(MalformedRecordError):
        normalize_page({"id": "x"}, directory)


def test_normalize_records_skips_malformed(directory, caplog):
    bad = make_page(page_id="bad")
    del bad["properties"]["SubGroup"]
    pages = [make_page(title="one"), bad, make_page(title="two")]

    with caplog.at_level(logging.WARNING, logger="normalizer"):
        records = normalize_records(pages, directory)

    assert [r.title for r in records] == ["one", "two"]
    assert "bad" in caplog.text
