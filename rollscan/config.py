"""
Centralized configuration management.

Configuration is loaded from:
1. Environment variables
2. .env file (if present)
3. Default values

Usage:
    from rollscan.config import get_config
    config = get_config()
    print(config.ocr.languages)  # "eng" unless OCR_LANGUAGES is set
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError


def _load_dotenv(dotenv_path: Optional[Path] = None) -> None:
    """
    Minimal .env loader.

    Supports KEY=VALUE, ignores blank lines and comments (#).
    Does not override existing environment variables.
    """
    if dotenv_path is None:
        dotenv_path = Path(__file__).resolve().parent.parent / ".env"

    if not dotenv_path.exists() or not dotenv_path.is_file():
        return

    for raw_line in dotenv_path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if not key:
            continue
        if os.getenv(key) in (None, ""):
            os.environ[key] = value


_load_dotenv()


def _get_bool_env(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    value = os.getenv(key, "").strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.getenv(key, "").strip()
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Characters tesseract may emit when reading class lists
STUDENT_WHITELIST = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 /-@."
)


@dataclass
class OCRConfig:
    """OCR (Tesseract) configuration."""
    languages: str = field(default_factory=lambda: os.getenv("OCR_LANGUAGES", "eng"))
    tesseract_path: str = field(default_factory=lambda: os.getenv("TESSERACT_PATH", ""))
    psm: int = field(default_factory=lambda: _get_int_env("OCR_PSM", 3))
    oem: int = field(default_factory=lambda: _get_int_env("OCR_OEM", 1))
    student_whitelist: str = field(
        default_factory=lambda: os.getenv("OCR_STUDENT_WHITELIST", STUDENT_WHITELIST)
    )
    # Words below this confidence are dropped; 0 keeps everything
    min_word_confidence: int = field(default_factory=lambda: _get_int_env("OCR_MIN_WORD_CONF", 0))

    def build_tesseract_config(self, whitelist: Optional[str] = None) -> str:
        """Build the command-line config string passed to tesseract."""
        parts = [f"--oem {self.oem}", f"--psm {self.psm}"]
        if whitelist:
            # Space must be preserved inside the whitelist value
            parts.append(f'-c tessedit_char_whitelist="{whitelist}"')
            parts.append("-c preserve_interword_spaces=1")
        return " ".join(parts)


@dataclass
class PreprocessConfig:
    """Image preprocessing applied before recognition."""
    enabled: bool = field(default_factory=lambda: _get_bool_env("PREPROCESS", True))
    max_width: int = field(default_factory=lambda: _get_int_env("PREPROCESS_MAX_WIDTH", 2000))
    threshold: int = field(default_factory=lambda: _get_int_env("PREPROCESS_THRESHOLD", 128))
    sharpen: bool = field(default_factory=lambda: _get_bool_env("PREPROCESS_SHARPEN", True))


@dataclass
class ExtractionConfig:
    """Record extraction tuning."""
    # Windowed strategy: look ahead 6 lines, consume 4 after an accepted record
    window_size: int = 6
    window_advance: int = 4

    # Table strategy: shorter data rows are ignored
    min_table_row_length: int = 5

    # Score parser: matched line plus the next two
    score_lookahead: int = 3

    max_workers: int = field(default_factory=lambda: _get_int_env("EXTRACT_MAX_WORKERS", 2))

    def __post_init__(self):
        for key in ("window_size", "window_advance", "score_lookahead", "max_workers"):
            if getattr(self, key) < 1:
                raise ConfigurationError(f"{key} must be positive", config_key=key)


@dataclass
class Config:
    """
    Main application configuration.

    All settings are loaded from environment variables with sensible defaults.
    Set DEBUG=1 in environment to enable debug mode.
    """

    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parent.parent)
    logs_dir: Path = field(default=None)

    # Debug mode (verbose logging, extraction events echoed at DEBUG level)
    debug: bool = field(default_factory=lambda: _get_bool_env("DEBUG", False))
    log_to_file: bool = field(default_factory=lambda: _get_bool_env("LOG_TO_FILE", False))

    ocr: OCRConfig = field(default_factory=OCRConfig)
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    def __post_init__(self):
        if self.logs_dir is None:
            self.logs_dir = self.base_dir / os.getenv("LOG_DIR", "logs")


_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
