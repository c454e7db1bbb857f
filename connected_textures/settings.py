"""
Connected texture settings and the line-oriented settings file.

The file format is deliberately loose: all whitespace is stripped from a
line, and if an ``=`` remains the text before it is the key and the text
after it the value. Every other line is a comment.
"""

import logging
import math
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import SettingsError, SettingsMissingError
from .gradients import GradientKind, GradientSettings

log = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = "settings.txt"

DEFAULT_SAMPLE_COUNT = 129
DEFAULT_SEAM_HEIGHT = 64.0
DEFAULT_STEEPNESS = 10.0
DEFAULT_VARIANCE = 5.0
DEFAULT_MAX_ATTEMPTS = 1000

# file key -> (attribute, parser)
SETTINGS_KEYS = {
    "sampleCount": ("sample_count", int),
    "seamHeight": ("seam_height", float),
    "steepness": ("steepness", float),
    "variance": ("variance", float),
    "seed": ("seed", int),
    "maxAttempts": ("max_attempts", int),
}

_DEFAULT_FILE_TEMPLATE = """\
The parser only looks for lines with equal signs, so comments can exist.
Spaces are allowed, but no new line whitespace.

The amount of samples the program will use in a walking gradient
sampleCount = {sample_count}

Where the walking gradient will start the halfway seam
seamHeight = {seam_height:g}

The reach of the gradient's blending in pixels using euclidean distance
steepness = {steepness:g}

The amplification applied to the walking gradient algorithm
variance = {variance:g}
"""


@dataclass(frozen=True)
class Settings:
    sample_count: int = DEFAULT_SAMPLE_COUNT
    variance: float = DEFAULT_VARIANCE
    steepness: float = DEFAULT_STEEPNESS
    seam_height: float = DEFAULT_SEAM_HEIGHT
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def __post_init__(self):
        if self.sample_count < 3:
            raise SettingsError(f"sampleCount must be >= 3, got {self.sample_count}")
        if not math.isfinite(self.variance) or self.variance < 0:
            raise SettingsError(f"variance must be >= 0, got {self.variance}")
        if not math.isfinite(self.steepness) or self.steepness <= 0:
            raise SettingsError(f"steepness must be > 0, got {self.steepness}")
        if not math.isfinite(self.seam_height):
            raise SettingsError(f"seamHeight must be finite, got {self.seam_height}")
        if self.max_attempts < 1:
            raise SettingsError(f"maxAttempts must be >= 1, got {self.max_attempts}")

    def with_seed(self, seed: Optional[int]) -> "Settings":
        return replace(self, seed=seed)

    def gradient_settings(self, kind: GradientKind, width: int, height: int) -> GradientSettings:
        return GradientSettings(
            kind=kind,
            width=width,
            height=height,
            sample_count=self.sample_count,
            variance=self.variance,
            steepness=self.steepness,
            seam_height=self.seam_height,
            max_attempts=self.max_attempts,
        )


def parse_settings_text(text: str) -> Dict[str, str]:
    """Collect ``key=value`` pairs; later lines override earlier ones."""
    pairs = {}
    for line in text.splitlines():
        line = "".join(line.split())
        key, sep, value = line.partition("=")
        if sep:
            pairs[key] = value
    return pairs


def settings_from_pairs(pairs: Dict[str, str]) -> Settings:
    values = {}
    for key, raw in pairs.items():
        if key not in SETTINGS_KEYS:
            log.debug("Ignoring unknown settings key %r", key)
            continue
        attribute, parser = SETTINGS_KEYS[key]
        try:
            values[attribute] = parser(raw)
        except ValueError:
            raise SettingsError(f"Invalid value for {key}: {raw!r}") from None
    return Settings(**values)


def load_settings(path: Union[str, Path]) -> Settings:
    path = Path(path)
    if not path.is_file():
        raise SettingsMissingError(f"Could not find settings file {path}")
    settings = settings_from_pairs(parse_settings_text(path.read_text(errors="replace")))
    log.info("Loaded settings from %s", path)
    return settings


def write_default_settings(path: Union[str, Path], settings: Optional[Settings] = None) -> Path:
    path = Path(path)
    settings = settings or Settings()
    path.write_text(
        _DEFAULT_FILE_TEMPLATE.format(
            sample_count=settings.sample_count,
            seam_height=settings.seam_height,
            steepness=settings.steepness,
            variance=settings.variance,
        )
    )
    log.info("Created default settings file %s", path)
    return path


def resolve_settings(path: Optional[Union[str, Path]] = None, cwd: Optional[Path] = None) -> Settings:
    """
    Load settings from ``path``, or from ``settings.txt`` in ``cwd``.

    An explicitly named file must exist. The implicit one is created with
    the defaults when it is missing.
    """
    if path is not None:
        return load_settings(path)

    default_path = (cwd or Path.cwd()) / DEFAULT_SETTINGS_FILE
    if not default_path.exists():
        write_default_settings(default_path)
    return load_settings(default_path)
