"""Tests for Configuration and ConfigurationStore."""
import threading

import pytest

from posestream.models.config import Configuration, ConfigurationStore


class TestConfiguration:
    """Defaults, validation and environment loading."""

    def test_defaults(self):
        config = Configuration()

        assert config.confidence_threshold == 0.3
        assert config.blur_radius == 30.0
        assert config.preserve_faces is True
        assert config.max_output_dimension == 640.0
        assert config.capture_interval == 2.0
        assert config.processing_fps == 10
        assert config.frame_interval == pytest.approx(0.1)

    @pytest.mark.parametrize("changes", [
        {"capture_interval": 0.4},
        {"capture_interval": 10.5},
        {"processing_fps": 0},
        {"processing_fps": 31},
        {"blur_radius": -1.0},
        {"blur_radius": 101.0},
        {"confidence_threshold": 1.5},
        {"max_output_dimension": 0},
        {"fade_duration": 0},
        {"max_observations": 0},
    ])
    def test_out_of_range_rejected(self, changes):
        with pytest.raises(ValueError):
            Configuration(**changes).validate()

    def test_bounds_are_inclusive(self):
        Configuration(capture_interval=0.5, processing_fps=30, blur_radius=0.0).validate()
        Configuration(capture_interval=10.0, processing_fps=1, blur_radius=100.0).validate()

    def test_to_dict(self):
        data = Configuration().to_dict()

        assert data["blur_radius"] == 30.0
        assert set(data) >= {"capture_interval", "processing_fps", "preserve_faces"}

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("POSE_BLUR_RADIUS", "12.5")
        monkeypatch.setenv("POSE_PRESERVE_FACES", "false")
        monkeypatch.setenv("POSE_PROCESSING_FPS", "15")

        config = Configuration.from_env()

        assert config.blur_radius == 12.5
        assert config.preserve_faces is False
        assert config.processing_fps == 15
        assert config.capture_interval == 2.0

    def test_from_env_validates(self, monkeypatch):
        monkeypatch.setenv("POSE_CAPTURE_INTERVAL", "60")

        with pytest.raises(ValueError):
            Configuration.from_env()


class TestConfigurationStore:
    """Snapshot swapping."""

    def test_update_replaces_snapshot(self):
        store = ConfigurationStore()
        before = store.current()

        after = store.update(blur_radius=50.0)

        assert store.current() is after
        assert after.blur_radius == 50.0
        assert before.blur_radius == 30.0

    def test_invalid_update_keeps_previous(self):
        store = ConfigurationStore()
        before = store.current()

        with pytest.raises(ValueError):
            store.update(processing_fps=100)
        assert store.current() is before

    def test_unknown_field_rejected(self):
        store = ConfigurationStore()

        with pytest.raises(ValueError):
            store.update(frame_rate=5)

    def test_invalid_initial_config_rejected(self):
        with pytest.raises(ValueError):
            ConfigurationStore(Configuration(processing_fps=0))

    def test_concurrent_updates_leave_valid_snapshot(self):
        store = ConfigurationStore()

        def writer(fps):
            for _ in range(50):
                store.update(processing_fps=fps)

        threads = [threading.Thread(target=writer, args=(fps,)) for fps in (5, 20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.current().processing_fps in (5, 20)
