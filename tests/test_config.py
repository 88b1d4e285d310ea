"""설정 로딩 테스트입니다. / Configuration loading tests."""

from __future__ import annotations

import pytest

from tidewind.config import AppConfig, ScoringRubric, load_app_config


def test_load_app_config_includes_secrets(tmp_path, monkeypatch) -> None:
    """환경 시크릿을 포함합니다. / Includes env secrets."""

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
timezone: Europe/Paris
rubric:
  min_wind_knots: 10
  bonus_hours: [12, 18]
forecast_feed:
  name: arome
  url: https://forecast.test/feed
  secret_suffixes: [A, B]
tide_feed:
  name: tides
  url: https://tides.test/feed
""".strip(),
        encoding="utf-8",
    )
    monkeypatch.setenv("TIDEWIND_API_KEY_A", "secret-a")
    monkeypatch.setenv("TIDEWIND_API_KEY_B", "secret-b")
    config = load_app_config(config_path)
    assert isinstance(config, AppConfig)
    assert config.forecast_feed is not None
    assert config.forecast_feed.api_keys == ["secret-a", "secret-b"]
    assert config.tide_feed is not None
    assert config.tide_feed.api_keys == []
    assert config.rubric.min_wind_knots == 10
    assert config.rubric.bonus_hours == (12, 18)
    assert config.rubric.full_tide_m == 4.0


def test_missing_secret_is_skipped(tmp_path, monkeypatch) -> None:
    """없는 시크릿은 건너뜁니다. / Missing secrets are skipped."""

    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "forecast_feed:\n  name: arome\n  url: https://f.test\n"
        "  secret_suffixes: [A, B]\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("TIDEWIND_API_KEY_A", "only-a")
    monkeypatch.delenv("TIDEWIND_API_KEY_B", raising=False)
    config = load_app_config(config_path)
    assert config.forecast_feed is not None
    assert config.forecast_feed.api_keys == ["only-a"]


def test_invalid_timezone_is_rejected(tmp_path) -> None:
    """알 수 없는 시간대는 거부합니다. / Unknown timezone is rejected."""

    config_path = tmp_path / "config.yaml"
    config_path.write_text("timezone: Mars/Olympus\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_config(config_path)


def test_non_mapping_root_is_rejected(tmp_path) -> None:
    """매핑이 아니면 거부합니다. / Non-mapping root is rejected."""

    config_path = tmp_path / "config.yaml"
    config_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_config(config_path)


def test_default_rubric_matches_session_thresholds() -> None:
    """기본 임계치입니다. / Default rubric thresholds."""

    rubric = AppConfig().rubric
    assert rubric == ScoringRubric()
    assert (rubric.min_wind_knots, rubric.good_wind_knots) == (12.0, 15.0)
    assert rubric.excellent_wind_knots == 20.0
    assert (rubric.min_tide_m, rubric.full_tide_m) == (2.5, 4.0)
    assert rubric.sea_sector == (225.0, 315.0)
    assert rubric.land_sector == (45.0, 135.0)
    assert AppConfig().timezone == "Europe/Paris"
