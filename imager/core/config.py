"""
Imager Configuration

Processing defaults and logging level, persisted as JSON.
"""

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from .matrix import is_int

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ImagerConfig:
    """
    Defaults used by the ImageProcessor facade.

    Attributes:
        log_level: Level name applied by configure_logging()
        save_quality: Encoder quality handed to Pillow (JPEG/WebP), None = Pillow default
        gaussian_size: Default Gaussian blur kernel size (odd)
        unsharp_size: Default unsharp mask kernel size (odd)
        pixel_size: Default block size for pixelize()
        sharp_amount: Default amplitude for sharp()
    """
    log_level: str = "WARNING"
    save_quality: Optional[int] = None
    gaussian_size: int = 5
    unsharp_size: int = 5
    pixel_size: int = 8
    sharp_amount: float = 1.0

    def validate(self) -> Tuple[bool, str]:
        """
        Validate settings.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            return False, f"Unknown log level {self.log_level!r}"

        if self.save_quality is not None:
            if not is_int(self.save_quality) or not 1 <= self.save_quality <= 100:
                return False, "Save quality must be an integer between 1 and 100"

        for name in ("gaussian_size", "unsharp_size"):
            size = getattr(self, name)
            if not is_int(size) or size < 1 or size % 2 == 0:
                return False, f"{name} must be a positive odd integer"

        if not is_int(self.pixel_size) or self.pixel_size < 1:
            return False, "Pixel size must be a positive integer"

        if not isinstance(self.sharp_amount, (int, float)) or isinstance(self.sharp_amount, bool):
            return False, "Sharp amount must be a number"

        return True, ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImagerConfig':
        """Build a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        return cls(**{key: value for key, value in data.items() if key in known})


def load_config(filepath: Union[str, Path]) -> ImagerConfig:
    """
    Load a config from a JSON file.

    Raises:
        ValueError: If the stored settings do not validate
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        data = json.load(f)

    config = ImagerConfig.from_dict(data)
    is_valid, error = config.validate()
    if not is_valid:
        raise ValueError(f"Invalid config in {filepath}: {error}")

    logger.debug(f"Loaded config from {filepath}")
    return config


def save_config(config: ImagerConfig, filepath: Union[str, Path]) -> None:
    """Write a config to a JSON file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)


def configure_logging(config: ImagerConfig) -> None:
    """Apply the config's log level to the root logger."""
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
