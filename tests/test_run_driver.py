import pytest

from firms_prebake.assembly import DEFERRED, WRITTEN, run_prebake
from firms_prebake.config import build_config
from firms_prebake.export import MonthStore, save_geojson
from firms_prebake.firms import FirmsRequestError
from firms_prebake.utils import decisions_frame

from conftest import FakeResponse, FakeSession, csv_body, csv_row


def make_config(tmp_path, **overrides):
    values = dict(
        bbox="-125,32,-113.5,43",
        start="2021-01",
        end="2021-03",
        sources="MODIS_SP",
        out_dir=str(tmp_path / "firms"),
        throttle_ms=0,
        max_retries=1,
        map_key="SECRETKEY",
    )
    values.update(overrides)
    return build_config(**values)


def test_runs_every_month_in_order(tmp_path, make_fetcher):
    session = FakeSession(handler=lambda url: FakeResponse(200, csv_body(csv_row(38.1, -120.5))))
    config = make_config(tmp_path)
    decisions = run_prebake(config, fetcher=make_fetcher(session))

    assert [d.month_key for d in decisions] == ["2021-01", "2021-02", "2021-03"]
    assert all(d.status == WRITTEN for d in decisions)
    assert (tmp_path / "firms" / "CA-2021-02.geojson").exists()


def test_deferral_does_not_stop_run(tmp_path, make_fetcher):
    def handler(url):
        if "/2021-02-" in url:
            return FakeResponse(429)
        return FakeResponse(200, "")

    config = make_config(tmp_path)
    decisions = run_prebake(config, fetcher=make_fetcher(FakeSession(handler=handler), max_retries=0))

    assert [d.status for d in decisions] == [WRITTEN, DEFERRED, WRITTEN]
    assert not (tmp_path / "firms" / "CA-2021-02.geojson").exists()


def test_rerun_skips_completed_months(tmp_path, make_fetcher):
    config = make_config(tmp_path, months="2021-03")
    store = MonthStore(config.out_dir, config.prefix)
    (tmp_path / "firms").mkdir()
    save_geojson({"type": "FeatureCollection", "features": [{}]}, store.path_for("2021-03"))

    session = FakeSession()
    decisions = run_prebake(config, fetcher=make_fetcher(session))

    assert decisions[0].status == "skipped"
    assert session.urls == []


def test_error_outside_window_handling_aborts_run(tmp_path, make_fetcher):
    class FailingStore(MonthStore):
        def write(self, month_key, detections):
            raise OSError("disk full")

    config = make_config(tmp_path)
    store = FailingStore(config.out_dir, config.prefix)
    with pytest.raises(OSError):
        run_prebake(config, fetcher=make_fetcher(FakeSession()), store=store)


def test_window_error_is_logged_with_redacted_key(tmp_path, make_fetcher, capsys):
    class LeakyFetcher:
        def __init__(self, inner):
            self.inner = inner

        def fetch(self, source, window):
            raise FirmsRequestError(f"failed {self.inner.build_url(source, window)}", 500)

        def redact(self, text):
            return self.inner.redact(text)

    config = make_config(tmp_path, months="2021-02")
    run_prebake(config, fetcher=LeakyFetcher(make_fetcher(FakeSession())))

    out = capsys.readouterr().out
    assert "[ERROR]" in out
    assert "SECRETKEY" not in out


def test_summary_frame(tmp_path, make_fetcher):
    config = make_config(tmp_path, months="2021-01,2021-02")
    decisions = run_prebake(config, fetcher=make_fetcher(FakeSession()))
    df = decisions_frame(decisions)

    assert df.columns == ["month", "status", "features", "reason"]
    assert df["month"].to_list() == ["2021-01", "2021-02"]
    assert df["features"].to_list() == [0, 0]
