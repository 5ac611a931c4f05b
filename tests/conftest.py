import pytest

from firms_prebake.firms import BoundingBox, RetryPolicy, WindowFetcher

CSV_HEADER = (
    "latitude,longitude,bright_ti4,scan,track,acq_date,acq_time,satellite,"
    "instrument,confidence,version,bright_ti5,frp,daynight"
)


def csv_row(lat, lon, acq_date="2021-08-01", acq_time="0912", satellite="N", instrument="VIIRS", frp="5.2"):
    return f"{lat},{lon},330.1,0.4,0.4,{acq_date},{acq_time},{satellite},{instrument},n,2.0NRT,290.1,{frp},D"


def csv_body(*rows):
    return "\n".join([CSV_HEADER, *rows]) + "\n"


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Returns queued responses; a callable handler can answer by URL instead."""

    def __init__(self, responses=None, handler=None):
        self.responses = list(responses or [])
        self.handler = handler
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        if self.handler is not None:
            result = self.handler(url)
        elif self.responses:
            result = self.responses.pop(0)
        else:
            result = FakeResponse(200, "")
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def bbox():
    return BoundingBox(-125.0, 32.0, -113.5, 43.0)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_fetcher(bbox, sleeps):
    def _make(session, max_retries=4, throttle_ms=800):
        policy = RetryPolicy(max_retries=max_retries, throttle_ms=throttle_ms)
        return WindowFetcher("SECRETKEY", bbox, policy, session=session, sleep=sleeps.append)

    return _make
