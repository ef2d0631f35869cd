import pytest
from core.config import EngineSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RWH_JITTER", "RWH_RANDOM_SEED", "RWH_GEOCODE_CACHE",
                 "RWH_GEOCODER_USER_AGENT", "RWH_WATER_TARIFF", "RWH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = EngineSettings.from_env()
    assert settings.jitter_enabled is True
    assert settings.random_seed is None
    assert settings.water_tariff_per_liter == 0.02
    assert settings.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("RWH_JITTER", "off")
    monkeypatch.setenv("RWH_RANDOM_SEED", "7")
    monkeypatch.setenv("RWH_GEOCODE_CACHE", "/tmp/geo.db")
    monkeypatch.setenv("RWH_WATER_TARIFF", "0.05")
    monkeypatch.setenv("RWH_LOG_LEVEL", "debug")

    settings = EngineSettings.from_env()
    assert settings.jitter_enabled is False
    assert settings.random_seed == 7
    assert settings.geocode_cache_path == "/tmp/geo.db"
    assert settings.water_tariff_per_liter == 0.05
    assert settings.log_level == "DEBUG"


def test_bad_values_fall_back(monkeypatch, caplog):
    """Verify unparseable values are logged and replaced by defaults."""
    monkeypatch.setenv("RWH_JITTER", "maybe")
    monkeypatch.setenv("RWH_RANDOM_SEED", "seven")
    monkeypatch.setenv("RWH_WATER_TARIFF", "cheap")

    settings = EngineSettings.from_env()
    assert settings.jitter_enabled is True
    assert settings.random_seed is None
    assert settings.water_tariff_per_liter == 0.02
    assert "RWH_WATER_TARIFF" in caplog.text


def test_seeded_rng_is_reproducible():
    settings = EngineSettings(random_seed=42)
    first = [settings.make_rng().random() for _ in range(3)]
    second = [settings.make_rng().random() for _ in range(3)]
    assert first == second


def test_to_dict():
    assert EngineSettings().to_dict()["jitter_enabled"] is True
