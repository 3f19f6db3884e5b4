"""
Configuration and Track Replay Test Suite

Tests for YAML config loading, recorded track loading and the headless
replay command line.
"""

import os
import sys
import textwrap
from datetime import datetime, timezone

import pytest

# Add project root to path
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

import headless
from geokalman.exceptions import InvalidConfiguration, InvalidMeasurement
from geokalman.io import ConfigLoader, load_filter_config, load_track
from geokalman.tracking import FilterConfig


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return str(path)


# =============================================================================
# TEST 1: Config Loader
# =============================================================================


class TestConfigLoader:
    """YAML filter configuration."""

    def test_full_config(self, tmp_path):
        path = _write(
            tmp_path,
            "filter.yaml",
            """
            filter:
              sensor_noise: 35.0
              acceleration_noise_sigma: 0.125
              min_time_interval_s: 0.01
            logging:
              level: debug
            """,
        )
        loader = ConfigLoader(path)
        config = loader.get_config()

        assert config.sensor_noise == 35.0
        assert config.acceleration_noise_sigma == 0.125
        assert config.min_time_interval_s == 0.01
        assert loader.get_log_level() == "DEBUG"

    def test_defaults_when_missing(self, tmp_path):
        path = _write(tmp_path, "empty.yaml", "")
        config = load_filter_config(path)

        assert config == FilterConfig()
        assert config.sensor_noise == 29.0
        assert config.acceleration_noise_sigma == 0.0625

    def test_partial_section(self, tmp_path):
        path = _write(tmp_path, "partial.yaml", "filter:\n  sensor_noise: 50\n")
        config = load_filter_config(path)

        assert config.sensor_noise == 50.0
        assert config.min_time_interval_s == 1e-4

    def test_no_file_loaded(self):
        loader = ConfigLoader()
        assert loader.get_config() == FilterConfig()
        assert loader.get_log_level() == "INFO"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader(str(tmp_path / "nope.yaml"))

    @pytest.mark.parametrize("value", ["0", "-5", "abc", ".nan"])
    def test_invalid_sensor_noise(self, tmp_path, value):
        path = _write(tmp_path, "bad.yaml", f"filter:\n  sensor_noise: {value}\n")
        with pytest.raises(InvalidConfiguration):
            ConfigLoader(path)

    def test_invalid_log_level(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", "logging:\n  level: chatty\n")
        with pytest.raises(InvalidConfiguration):
            ConfigLoader(path).get_log_level()

    def test_logging_section_not_mapping(self, tmp_path):
        path = _write(tmp_path, "bad.yaml", "logging: DEBUG\n")
        with pytest.raises(InvalidConfiguration, match="logging"):
            ConfigLoader(path).get_log_level()

    def test_bundled_default_config(self):
        config = load_filter_config(os.path.join(ROOT, "configs", "default.yaml"))
        assert config == FilterConfig()


# =============================================================================
# TEST 2: Track Loader
# =============================================================================


class TestTrackLoader:
    """Recorded readings from YAML."""

    def test_load_track(self, tmp_path):
        path = _write(
            tmp_path,
            "walk.yaml",
            """
            track:
              name: Test walk
              readings:
                - {latitude: 45.0703, longitude: 7.6869, altitude: 240.0, timestamp: 0.0,
                   horizontal_accuracy: 5.0, vertical_accuracy: 5.0}
                - {latitude: 45.0705, longitude: 7.6867, altitude: 241.0, timestamp: 2.5}
            """,
        )
        track = load_track(path)

        assert track.name == "Test walk"
        assert len(track) == 2
        assert track.duration_s == pytest.approx(2.5)
        assert track.readings[0].horizontal_accuracy == 5.0
        assert track.readings[1].vertical_accuracy == 0.0

    def test_datetime_timestamps(self, tmp_path):
        path = _write(
            tmp_path,
            "walk.yaml",
            """
            track:
              readings:
                - latitude: 45.0
                  longitude: 7.0
                  altitude: 0.0
                  timestamp: 2025-05-09T10:00:00Z
                - latitude: 45.0
                  longitude: 7.0
                  altitude: 0.0
                  timestamp: 2025-05-09T10:00:01Z
            """,
        )
        track = load_track(path)

        assert track.name == "walk"
        expected = datetime(2025, 5, 9, 10, 0, 0, tzinfo=timezone.utc).timestamp()
        assert track.readings[0].timestamp == pytest.approx(expected)
        assert track.duration_s == pytest.approx(1.0)

    def test_missing_field(self, tmp_path):
        path = _write(
            tmp_path,
            "bad.yaml",
            """
            track:
              readings:
                - {latitude: 45.0, longitude: 7.0, timestamp: 0.0}
            """,
        )
        with pytest.raises(InvalidMeasurement, match="altitude"):
            load_track(path)

    def test_non_numeric_field(self, tmp_path):
        path = _write(
            tmp_path,
            "bad.yaml",
            """
            track:
              readings:
                - {latitude: north, longitude: 7.0, altitude: 0.0, timestamp: 0.0}
            """,
        )
        with pytest.raises(InvalidMeasurement):
            load_track(path)

    def test_non_numeric_accuracy(self, tmp_path):
        path = _write(
            tmp_path,
            "bad.yaml",
            """
            track:
              readings:
                - {latitude: 45.0, longitude: 7.0, altitude: 0.0, timestamp: 0.0}
                - {latitude: 45.0, longitude: 7.0, altitude: 0.0, timestamp: 1.0,
                   horizontal_accuracy: abc}
            """,
        )
        with pytest.raises(InvalidMeasurement, match="reading 1: horizontal_accuracy"):
            load_track(path)

    @pytest.mark.parametrize(
        "content, section",
        [
            ("- 1\n- 2\n", "top level"),
            ("track: [1, 2]\n", "'track'"),
            ("track:\n  readings: {a: 1}\n", "'readings'"),
        ],
    )
    def test_malformed_sections(self, tmp_path, content, section):
        path = _write(tmp_path, "bad.yaml", content)
        with pytest.raises(InvalidMeasurement, match=section):
            load_track(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_track(str(tmp_path / "nope.yaml"))


# =============================================================================
# TEST 3: Headless Replay
# =============================================================================


class TestHeadlessReplay:
    """Command line replay of the bundled sample track."""

    @pytest.fixture
    def sample_track(self):
        return os.path.join(ROOT, "tracks", "sample_walk.yaml")

    def test_quiet_output(self, sample_track, capsys):
        assert headless.main([sample_track, "--quiet"]) == 0

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == len(load_track(sample_track))

        t, lat, lon, alt = lines[0].split(",")
        assert float(lat) == pytest.approx(45.0703, abs=1e-7)
        assert float(alt) == pytest.approx(240.0, abs=0.01)

    def test_duplicate_timestamp_held(self, sample_track, capsys):
        headless.main([sample_track, "--quiet"])
        lines = capsys.readouterr().out.strip().splitlines()

        # readings 4 and 5 share a timestamp
        assert lines[3] == lines[4]

    def test_report_output(self, sample_track, capsys):
        assert headless.main([sample_track, "--sensor-noise", "50"]) == 0
        out = capsys.readouterr().out
        assert "Piazza Castello walk" in out
        assert "Sensor noise: 50" in out

    def test_with_config(self, sample_track):
        config = os.path.join(ROOT, "configs", "default.yaml")
        assert headless.main([sample_track, "--config", config, "--quiet"]) == 0

    def test_missing_track(self, tmp_path, capsys):
        assert headless.main([str(tmp_path / "nope.yaml")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_noise(self, sample_track, capsys):
        assert headless.main([sample_track, "--sensor-noise", "-1"]) == 1

    def test_malformed_track(self, tmp_path, capsys):
        path = _write(
            tmp_path,
            "bad.yaml",
            """
            track:
              readings:
                - {latitude: 45.0, longitude: 7.0, altitude: 0.0, timestamp: 0.0,
                   vertical_accuracy: high}
            """,
        )
        assert headless.main([path, "--quiet"]) == 1
        assert "vertical_accuracy" in capsys.readouterr().err

    def test_malformed_logging_section(self, sample_track, tmp_path):
        config = _write(tmp_path, "bad.yaml", "logging: DEBUG\n")
        assert headless.main([sample_track, "--config", config, "--quiet"]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
