"""End-to-end tests for scripts.fetch_weekly with canned upstream responses."""

import json
import re

import pytest
import requests

from scripts import fetch_weekly
from tests.conftest import FakeResponse, FakeSession


@pytest.fixture
def out_file(tmp_path):
    return tmp_path / "public" / "data" / "latest.json"


class TestRun:
    def test_creates_directory_and_writes_record(self, upstream, fixed_now, out_file):
        assert not out_file.parent.exists()
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        assert json.loads(out_file.read_text(encoding="utf-8")) == {
            "date": "2024-10-10",
            "siberianHighIdx": 1.4,
            "aoIndex": 1.237,
            "japanSeaSstAnom": 1.6,
            "ensoPhase": 0,
            "notes": "auto via Actions",
        }

    def test_output_shape(self, upstream, fixed_now, out_file):
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        text = out_file.read_text(encoding="utf-8")
        data = json.loads(text)
        assert list(data) == ["date", "siberianHighIdx", "aoIndex", "japanSeaSstAnom", "ensoPhase", "notes"]
        assert data["ensoPhase"] in (-1, 0, 1)
        assert -2 <= data["siberianHighIdx"] <= 2
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", data["date"])
        assert text.startswith('{\n  "date": ')

    def test_overwrite_is_idempotent(self, upstream, fixed_now, out_file):
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        first = out_file.read_bytes()
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        assert out_file.read_bytes() == first
        assert [p.name for p in out_file.parent.iterdir()] == ["latest.json"]

    def test_degraded_sources_still_write_zeros(self, fixed_now, out_file):
        session = FakeSession(
            {
                "ao.sprd2.txt": "",
                "oni.ascii.txt": "",
                "sea_surface_temperature": {"daily": {}},
                "mean_sea_level_pressure": {},
            }
        )
        record = fetch_weekly.run(out_file, session=session, now=fixed_now)
        assert (record.ao_index, record.enso_phase, record.japan_sea_sst_anom, record.siberian_high_idx) == (
            0.0,
            0,
            0.0,
            0.0,
        )
        assert out_file.exists()

    def test_failure_writes_nothing(self, upstream, fixed_now, out_file):
        upstream["mean_sea_level_pressure"] = requests.ConnectionError("unreachable")
        with pytest.raises(requests.ConnectionError):
            fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        assert not out_file.exists()

    def test_failure_keeps_previous_file(self, upstream, fixed_now, out_file):
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        before = out_file.read_bytes()
        upstream["oni.ascii.txt"] = requests.ConnectionError("reset by peer")
        with pytest.raises(requests.ConnectionError):
            fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        assert out_file.read_bytes() == before

    def test_http_error_statuses_publish_zeros(self, upstream, fixed_now, out_file):
        upstream["mean_sea_level_pressure"] = FakeResponse(
            '{"error": true, "reason": "Cannot initialize WeatherVariable"}', status_code=400
        )
        upstream["ao.sprd2.txt"] = FakeResponse("<html>404 Not Found</html>", status_code=404)
        record = fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        assert record.siberian_high_idx == 0.0
        assert record.ao_index == 0.0
        data = json.loads(out_file.read_text(encoding="utf-8"))
        assert data["siberianHighIdx"] == 0
        assert data["aoIndex"] == 0
        assert data["japanSeaSstAnom"] == 1.6

    def test_injected_session_is_not_closed(self, upstream, fixed_now, out_file):
        session = FakeSession(upstream)
        fetch_weekly.run(out_file, session=session, now=fixed_now)
        assert not session.closed
        assert len(session.calls) == 4


class TestMain:
    def test_success_exit_code_and_stdout(self, upstream, out_file, monkeypatch, capsys):
        monkeypatch.setattr(fetch_weekly, "OUT_FILE", out_file)
        monkeypatch.setattr(fetch_weekly.requests, "Session", lambda: FakeSession(upstream))
        assert fetch_weekly.main([]) == 0
        assert out_file.exists()
        out = capsys.readouterr().out
        assert "Wrote" in out
        assert str(out_file) in out

    def test_failure_exit_code(self, out_file, monkeypatch):
        monkeypatch.setattr(fetch_weekly, "OUT_FILE", out_file)
        monkeypatch.setattr(fetch_weekly.requests, "Session", lambda: FakeSession({}))
        assert fetch_weekly.main([]) == 1
        assert not out_file.exists()

    def test_rejects_options(self):
        with pytest.raises(SystemExit) as excinfo:
            fetch_weekly.main(["--output", "elsewhere.json"])
        assert excinfo.value.code == 2

    def test_default_output_path(self):
        assert fetch_weekly.OUT_FILE.as_posix() == "public/data/latest.json"


class TestOutputFormat:
    def test_floats_keep_decimal_point(self, upstream, fixed_now, out_file):
        upstream["mean_sea_level_pressure"] = {"daily": {"mean_sea_level_pressure": [104000.0] * 7}}
        upstream["ao.sprd2.txt"] = ""
        fetch_weekly.run(out_file, session=FakeSession(upstream), now=fixed_now)
        text = out_file.read_text(encoding="utf-8")
        assert '  "siberianHighIdx": 2.0,\n' in text
        assert '  "aoIndex": 0.0,\n' in text
        assert '  "ensoPhase": 0,\n' in text
