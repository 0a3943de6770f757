"""Dashboard configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timezone, tzinfo
from pathlib import Path
from typing import Any, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .data_processing.metrics.summary import DEFAULT_DURATION_BUCKETS, DurationBucket, validate_buckets
from .data_processing.options import OPTION_ORDERS, OptionOrder


def _parse_bucket(entry: Any) -> DurationBucket:
    try:
        upper = entry.get("upper")
        return DurationBucket(
            label=str(entry["label"]),
            lower=float(entry["lower"]),
            upper=None if upper is None else float(upper),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Malformed duration_buckets entry: {entry!r}") from exc


@dataclass(frozen=True)
class DashboardConfig:
    """Settings shared by every derived dashboard view.

    Attributes
    ----------
    tracked_profile_id:
        Profile id of the player whose games are analyzed.
    option_order:
        Filter menu ordering, ``"first_seen"`` or ``"sorted"``.
    tz:
        Zone used to turn match timestamps into chart dates. Defaults to UTC.
    duration_buckets:
        Game-length ranges reported by duration stats.
    """

    tracked_profile_id: str
    option_order: OptionOrder = "first_seen"
    tz: tzinfo = timezone.utc
    duration_buckets: Sequence[DurationBucket] = DEFAULT_DURATION_BUCKETS

    def validate(self) -> None:
        """Validate that the configuration can drive a dashboard."""

        if not str(self.tracked_profile_id).strip():
            raise ValueError("tracked_profile_id is required to load player stats")
        if self.option_order not in OPTION_ORDERS:
            raise ValueError(
                f"option_order must be one of {', '.join(OPTION_ORDERS)}: {self.option_order!r}"
            )
        if not isinstance(self.tz, tzinfo):
            raise ValueError(f"tz must be a tzinfo instance: {self.tz!r}")
        if not self.duration_buckets:
            raise ValueError("At least one duration bucket is required")
        validate_buckets(self.duration_buckets)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "DashboardConfig":
        if "tracked_profile_id" not in data:
            raise ValueError("Config is missing required key: tracked_profile_id")

        kwargs: dict[str, Any] = {"tracked_profile_id": str(data["tracked_profile_id"])}
        if "option_order" in data:
            kwargs["option_order"] = data["option_order"]
        if data.get("timezone"):
            try:
                kwargs["tz"] = ZoneInfo(data["timezone"])
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown timezone setting: {data['timezone']!r}") from exc
        if "duration_buckets" in data:
            kwargs["duration_buckets"] = tuple(
                _parse_bucket(entry) for entry in data["duration_buckets"] or ()
            )

        config = cls(**kwargs)
        config.validate()
        return config

    @classmethod
    def from_yaml(cls, path: Path) -> "DashboardConfig":
        """Load configuration from a YAML mapping."""

        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        return cls.from_mapping(data)
