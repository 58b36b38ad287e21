from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

ALL_ISSUE_TYPES = (
    "adverb",
    "passive",
    "complex",
    "veryComplex",
    "hardWord",
    "qualifier",
)


@dataclass(slots=True)
class AnalyzerSettings:
    """Thresholds used by the metrics and issue detector."""

    words_per_minute: float = 250.0
    complex_sentence_words: int = 25
    very_complex_sentence_words: int = 35
    hard_word_syllables: int = 4
    adverb_allowance: int = 2
    passive_allowance: int = 4


@dataclass(slots=True)
class SchedulingSettings:
    """Quiescence windows (seconds) for the live analysis loop."""

    analysis_delay: float = 1.0
    highlight_delay: float = 0.5


@dataclass(slots=True)
class ProseFeedbackConfig:
    """Configuration options for the prose feedback engine."""

    highlight_categories: list[str] = field(
        default_factory=lambda: list(ALL_ISSUE_TYPES)
    )
    active_categories: list[str] = field(default_factory=lambda: list(ALL_ISSUE_TYPES))
    show_all_highlights: bool = True
    analyzer: AnalyzerSettings = field(default_factory=AnalyzerSettings)
    scheduling: SchedulingSettings = field(default_factory=SchedulingSettings)

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _build_section(cls: type, data: Mapping[str, Any]) -> Any:
    allowed = {f.name for f in fields(cls)}
    return cls(**{key: data[key] for key in data if key in allowed})


def _build_kwargs(data: Mapping[str, Any]) -> dict[str, Any]:
    allowed = {f.name for f in fields(ProseFeedbackConfig)}
    kwargs = {key: data[key] for key in data if key in allowed}
    for name, cls in (("analyzer", AnalyzerSettings), ("scheduling", SchedulingSettings)):
        value = data.get(name)
        if isinstance(value, cls):
            kwargs[name] = value
        elif isinstance(value, Mapping):
            kwargs[name] = _build_section(cls, value)
        else:
            kwargs.pop(name, None)
    for name in ("highlight_categories", "active_categories"):
        if name in kwargs:
            kwargs[name] = _validate_categories(name, kwargs[name])
    return kwargs


def _validate_categories(name: str, value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    categories = [str(item) for item in value or []]
    unknown = [item for item in categories if item not in ALL_ISSUE_TYPES]
    if unknown:
        raise ValueError(f"Unknown issue categories in {name}: {', '.join(unknown)}")
    return categories


def config_from_dict(data: Mapping[str, Any] | None) -> ProseFeedbackConfig:
    """Build a ProseFeedbackConfig from a dictionary-like input."""
    if data is None:
        return ProseFeedbackConfig()
    return ProseFeedbackConfig(**_build_kwargs(data))


def config_from_yaml(path: str | Path) -> ProseFeedbackConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ProseFeedbackConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ProseFeedbackConfig()
    return config_from_yaml(path)
