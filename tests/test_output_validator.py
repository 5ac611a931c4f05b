import json

from firms_prebake.export import MonthStore
from firms_prebake.firms import FireDetection
from firms_prebake.validation import validate_and_report, validate_month_file


def detection(lon, lat, acq_time="0912"):
    return FireDetection(
        longitude=lon, latitude=lat, acq_date="2021-08-01", acq_time=acq_time,
        satellite="N", instrument="VIIRS",
    )


def test_clean_month_passes(tmp_path, bbox):
    store = MonthStore(str(tmp_path))
    path = store.write("2021-08", [detection(-120.5, 38.1), detection(-120.5, 38.1, "1000")])

    result = validate_month_file(path, bbox)

    assert result["errors"] == []
    assert result["feature_count"] == 2
    assert validate_and_report([path], bbox)


def test_flags_duplicates_and_points_outside(tmp_path, bbox):
    features = [
        detection(-120.5, 38.1).to_geojson(),
        detection(-120.50001, 38.10001).to_geojson(),
        detection(-100.0, 38.1).to_geojson(),
    ]
    path = tmp_path / "CA-2021-08.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": features}))

    result = validate_month_file(str(path), bbox)

    assert result["duplicate_keys"] == 1
    assert result["outside_bbox"] == 1
    assert not validate_and_report([str(path)], bbox)


def test_missing_and_unreadable_files(tmp_path):
    broken = tmp_path / "broken.geojson"
    broken.write_text("{")

    assert validate_month_file(str(tmp_path / "missing.geojson"))["errors"]
    assert validate_month_file(str(broken))["errors"]


def test_empty_month_is_a_warning(tmp_path):
    path = MonthStore(str(tmp_path)).write("2021-08", [])
    result = validate_month_file(path)

    assert result["errors"] == []
    assert result["warnings"]


def test_malformed_geometry_is_reported_not_raised(tmp_path):
    features = [
        {"type": "Feature", "properties": {}, "geometry": [-120.5, 38.1]},
        {"type": "Feature", "properties": {}, "geometry": {"type": "Point", "coordinates": "x"}},
    ]
    path = tmp_path / "CA-2021-08.geojson"
    path.write_text(json.dumps({"type": "FeatureCollection", "features": features}))

    result = validate_month_file(str(path))

    assert result["feature_count"] == 2
    assert any("without coordinates" in e for e in result["errors"])
