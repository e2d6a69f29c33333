"""
Configuration loader.

Loads settings from config/settings.yaml and .env,
merges them, and provides a typed Settings object
accessible everywhere via `get_settings()`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from dotenv import load_dotenv

# Project root = 2 levels up from src/ssis_compliance/
ROOT = Path(__file__).resolve().parent.parent.parent
CONFIG_DIR = ROOT / "config"
SETTINGS_FILE = CONFIG_DIR / "settings.yaml"

MB = 1024 * 1024


@dataclass
class PathSettings:
    output_dir: Path = field(default_factory=lambda: ROOT / "outputs")
    report_dir: Path = field(default_factory=lambda: ROOT / "outputs" / "reports")
    log_dir: Path = field(default_factory=lambda: ROOT / "outputs" / "logs")


@dataclass
class CompressionSettings:
    target_bytes: int = int(4.5 * MB)
    max_attempts: int = 5
    max_dimension: int = 2048
    transport_limit_bytes: int = 5 * MB


@dataclass
class AISettings:
    provider: str = "openai"  # "openai", "local", "none"
    openai_model: str = "gpt-4o"
    local_model: str = "llama3.2-vision"
    temperature: float = 0.0
    max_tokens: int = 1000


@dataclass
class Settings:
    """Top-level settings object."""

    paths: PathSettings = field(default_factory=PathSettings)
    compression: CompressionSettings = field(default_factory=CompressionSettings)
    ai: AISettings = field(default_factory=AISettings)
    log_level: str = "INFO"

    def ensure_dirs(self) -> None:
        """Create all output directories if they don't exist."""
        for p in [
            self.paths.output_dir,
            self.paths.report_dir,
            self.paths.log_dir,
        ]:
            p.mkdir(parents=True, exist_ok=True)


# ── Singleton ─────────────────────────────────────────

_settings: Settings | None = None


def _load_yaml() -> dict:
    """Load the YAML config file."""
    if SETTINGS_FILE.exists():
        with open(SETTINGS_FILE, "r") as f:
            return yaml.safe_load(f) or {}
    return {}


def get_settings() -> Settings:
    """Get the global Settings instance (lazy-loaded singleton)."""
    global _settings
    if _settings is not None:
        return _settings

    load_dotenv(ROOT / ".env")

    raw = _load_yaml()

    paths_raw = raw.get("paths", {})
    paths = PathSettings(**{k: ROOT / v for k, v in paths_raw.items()}) if paths_raw else PathSettings()

    comp_raw = raw.get("compression", {})
    compression = CompressionSettings(
        target_bytes=int(os.getenv("COMPRESSION_TARGET_BYTES", comp_raw.get("target_bytes", int(4.5 * MB)))),
        max_attempts=int(os.getenv("COMPRESSION_MAX_ATTEMPTS", comp_raw.get("max_attempts", 5))),
        max_dimension=comp_raw.get("max_dimension", 2048),
        transport_limit_bytes=comp_raw.get("transport_limit_bytes", 5 * MB),
    )

    ai_raw = raw.get("ai", {})
    ai = AISettings(
        provider=os.getenv("AI_PROVIDER", ai_raw.get("provider", "openai")),
        openai_model=os.getenv("OPENAI_MODEL", ai_raw.get("openai_model", "gpt-4o")),
        local_model=os.getenv("OLLAMA_MODEL", ai_raw.get("local_model", "llama3.2-vision")),
        temperature=ai_raw.get("temperature", 0.0),
        max_tokens=ai_raw.get("max_tokens", 1000),
    )

    log_raw = raw.get("logging", {})

    _settings = Settings(
        paths=paths,
        compression=compression,
        ai=ai,
        log_level=os.getenv("LOG_LEVEL", log_raw.get("level", "INFO")),
    )

    return _settings


def reset_settings() -> None:
    """Drop the cached Settings so the next `get_settings()` reloads."""
    global _settings
    _settings = None
