from __future__ import annotations

import pytest

from finder.config import DEFAULT_ENDPOINT, FinderSettings


def test_defaults() -> None:
    settings = FinderSettings()
    assert settings.endpoint == DEFAULT_ENDPOINT
    assert settings.batch_size == 10
    assert settings.fetch_delay == 0.3
    assert settings.max_tries == 3


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("KOLEJ_FINDER_BATCH_SIZE", "25")
    monkeypatch.setenv("KOLEJ_FINDER_FETCH_DELAY", "1.5")
    monkeypatch.setenv("KOLEJ_FINDER_ENDPOINT", "https://directory.test/")
    monkeypatch.setenv("KOLEJ_FINDER_UNRELATED", "ignored")

    settings = FinderSettings.from_env()

    assert settings.batch_size == 25
    assert settings.fetch_delay == 1.5
    assert settings.endpoint == "https://directory.test/"


def test_merged_skips_none() -> None:
    settings = FinderSettings(batch_size=5).merged(batch_size=None, fetch_delay=0)
    assert settings.batch_size == 5
    assert settings.fetch_delay == 0


@pytest.mark.parametrize(
    "overrides",
    [{"batch_size": 0}, {"max_tries": 0}, {"fetch_delay": -1}],
)
def test_invalid_values(overrides) -> None:
    with pytest.raises(ValueError):
        FinderSettings(**overrides)


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValueError, match="Unknown settings"):
        FinderSettings.from_dict({"batchsize": 3})


def test_env_integer_that_is_not_a_number(monkeypatch) -> None:
    monkeypatch.setenv("KOLEJ_FINDER_BATCH_SIZE", "abc")
    with pytest.raises(ValueError, match="KOLEJ_FINDER_BATCH_SIZE must be an integer"):
        FinderSettings.from_env()


def test_env_fractional_batch_size_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("KOLEJ_FINDER_BATCH_SIZE", "2.5")
    with pytest.raises(ValueError, match="must be an integer"):
        FinderSettings.from_env()


def test_env_bad_delay(monkeypatch) -> None:
    monkeypatch.setenv("KOLEJ_FINDER_FETCH_DELAY", "soon")
    with pytest.raises(ValueError, match="must be a number"):
        FinderSettings.from_env()


def test_env_numeric_user_agent_stays_a_string(monkeypatch) -> None:
    monkeypatch.setenv("KOLEJ_FINDER_USER_AGENT", "2")
    monkeypatch.setenv("KOLEJ_FINDER_TIMEOUT", "5")

    settings = FinderSettings.from_env()

    assert settings.user_agent == "2"
    assert settings.timeout == 5.0
    assert isinstance(settings.timeout, float)


@pytest.mark.parametrize("batch_size", [2.5, "3", True])
def test_non_integer_batch_size_rejected(batch_size) -> None:
    with pytest.raises(ValueError, match="batch_size must be an integer"):
        FinderSettings(batch_size=batch_size)
