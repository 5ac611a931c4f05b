from datetime import date

import pytest
import requests

from firms_prebake.firms import RequestWindow, RetryPolicy
from firms_prebake.firms.firms_collect import (
    Attempting,
    Backoff,
    Exhausted,
    FirmsRequestError,
    Succeeded,
    parse_csv_rows,
)

from conftest import FakeResponse, FakeSession, csv_body, csv_row

WINDOW = RequestWindow(date(2021, 8, 11), 10)


def test_url_layout(make_fetcher):
    fetcher = make_fetcher(FakeSession())
    assert fetcher.build_url("VIIRS_SNPP_SP", WINDOW) == (
        "https://firms.modaps.eosdis.nasa.gov/api/area/csv/SECRETKEY/VIIRS_SNPP_SP/"
        "-125,32,-113.5,43/10/2021-08-11"
    )
    assert "SECRETKEY" not in fetcher.redact(fetcher.build_url("VIIRS_SNPP_SP", WINDOW))


def test_success_parses_and_filters_rows(make_fetcher, sleeps):
    body = csv_body(csv_row(38.1, -120.5), csv_row(10.0, -120.5), csv_row("x", -120.5))
    session = FakeSession([FakeResponse(200, body)])
    result = make_fetcher(session).fetch("VIIRS_SNPP_SP", WINDOW)

    assert not result.rate_limited
    assert result.attempts == 1
    assert len(result.features) == 1
    assert result.features[0].src == "VIIRS_SNPP_SP"
    # pacing delay after the successful call
    assert sleeps == [0.8]


@pytest.mark.parametrize("text", ["", "   \n", csv_body()])
def test_empty_or_header_only_body_is_zero_features(make_fetcher, text):
    result = make_fetcher(FakeSession([FakeResponse(200, text)])).fetch("MODIS_SP", WINDOW)
    assert result.features == []
    assert not result.rate_limited


def test_rate_limit_then_success(make_fetcher, sleeps):
    session = FakeSession(
        [FakeResponse(429), FakeResponse(403), FakeResponse(200, csv_body(csv_row(38.1, -120.5)))]
    )
    result = make_fetcher(session).fetch("MODIS_SP", WINDOW)

    assert len(result.features) == 1
    assert not result.rate_limited
    assert result.attempts == 3
    # linear backoff 15s, 30s then the pacing delay
    assert sleeps == [15.0, 30.0, 0.8]


def test_persistent_rate_limit_is_exhausted_not_raised(make_fetcher, sleeps):
    session = FakeSession([FakeResponse(429)] * 10)
    result = make_fetcher(session, max_retries=4).fetch("MODIS_SP", WINDOW)

    assert result.features == []
    assert result.rate_limited
    assert result.attempts == 5
    assert len(session.urls) == 5
    assert sleeps == [15.0, 30.0, 45.0, 60.0, 75.0]


def test_backoff_is_capped():
    policy = RetryPolicy(backoff_base_ms=15000, backoff_cap_ms=120000)
    assert [policy.backoff_ms(n) for n in (0, 3, 7, 20)] == [15000, 60000, 120000, 120000]


def test_state_transitions(make_fetcher):
    session = FakeSession([FakeResponse(429), FakeResponse(200, "")])
    fetcher = make_fetcher(session, max_retries=1)

    state = fetcher.step(Attempting(0), "MODIS_SP", WINDOW)
    assert state == Backoff(0, 429)
    state = fetcher.step(state, "MODIS_SP", WINDOW)
    assert state == Attempting(1)
    state = fetcher.step(state, "MODIS_SP", WINDOW)
    assert state == Succeeded([])

    assert fetcher.step(Backoff(1, 403), "MODIS_SP", WINDOW) == Exhausted()
    with pytest.raises(ValueError):
        fetcher.step(Exhausted(), "MODIS_SP", WINDOW)


def test_other_status_fails_fast(make_fetcher, sleeps):
    session = FakeSession([FakeResponse(500), FakeResponse(200, "")])
    with pytest.raises(FirmsRequestError) as excinfo:
        make_fetcher(session).fetch("MODIS_SP", WINDOW)

    assert excinfo.value.status_code == 500
    assert len(session.urls) == 1
    assert sleeps == []


def test_transport_error_propagates(make_fetcher):
    session = FakeSession([requests.ConnectionError("boom")])
    with pytest.raises(requests.ConnectionError):
        make_fetcher(session).fetch("MODIS_SP", WINDOW)


def test_parse_csv_rows_keeps_text():
    rows = parse_csv_rows(csv_body(csv_row(38.1, -120.5, acq_time="0042")))
    assert rows[0]["acq_time"] == "0042"
    assert rows[0]["latitude"] == "38.1"


def test_missing_map_key(bbox):
    from firms_prebake.firms import WindowFetcher

    with pytest.raises(ValueError):
        WindowFetcher("", bbox, session=FakeSession())
