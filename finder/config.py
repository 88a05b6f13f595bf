"""Runtime settings for the finder: endpoint, batching and pacing."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

DEFAULT_ENDPOINT = "https://kn.vutbr.cz/is2/index.html"
ENV_PREFIX = "KOLEJ_FINDER_"


@dataclass(frozen=True)
class FinderSettings:
    endpoint: str = DEFAULT_ENDPOINT
    batch_size: int = 10
    fetch_delay: float = 0.3  # seconds between batches
    max_tries: int = 3
    timeout: float = 30.0
    user_agent: str = "KolejFinder/0.1"

    def __post_init__(self) -> None:
        for name in ("batch_size", "max_tries"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        for name in ("fetch_delay", "timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")
        if self.max_tries < 1:
            raise ValueError(f"max_tries must be at least 1, got {self.max_tries}")
        if self.fetch_delay < 0:
            raise ValueError(f"fetch_delay cannot be negative, got {self.fetch_delay}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FinderSettings":
        known = set(asdict(cls()).keys())
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX) -> "FinderSettings":
        """Read overrides from the environment, converted to each field's type."""
        kinds = {f.name: type(f.default) for f in fields(cls)}
        data: Dict[str, Any] = {}
        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            name = key[len(prefix) :].lower()
            if name in kinds:
                data[name] = _coerce_env_value(key, value, kinds[name])
        return cls.from_dict(data)

    def merged(self, **overrides: Any) -> "FinderSettings":
        """Copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _coerce_env_value(key: str, value: str, kind: type) -> Any:
    try:
        return kind(value.strip()) if kind is not str else value
    except ValueError:
        raise ValueError(
            f"{key} must be {'an integer' if kind is int else 'a number'}, got {value!r}"
        ) from None


__all__ = ["FinderSettings", "DEFAULT_ENDPOINT", "ENV_PREFIX"]
