"""
Application settings management for Verbico.

Settings file layout:
- settings.template.json: developer defaults (overwritten on update)
- user_settings.json: only the values the user changed in the UI
- On load the template is read first and user settings are applied on top

Cache:
- _settings_cache maps a settings path to its AppSettings instance
- load() prefers the cache while the file modification times are unchanged
- save() refreshes the cache
- invalidate_settings_cache() clears it explicitly

The Gemini API key is never read from or written to these files; it comes
from the environment (see API_KEY_ENV_VARS).
"""

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import json

from verbico.services.languages import AUTO_DETECT, is_supported

# Module logger
logger = logging.getLogger(__name__)

# Settings cache: path -> (mtime_template, mtime_user, AppSettings)
_settings_cache: dict[str, tuple[float, float, "AppSettings"]] = {}
_settings_cache_lock = threading.Lock()

# Settings the user can change from the UI (saved to user_settings.json)
USER_SETTINGS_KEYS = {
    "default_source_language",
    "default_target_language",
}

# Environment variables checked for the API key, in priority order
API_KEY_ENV_VARS = ("VERBICO_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


def resolve_api_key(environ: Optional[dict[str, str]] = None) -> Optional[str]:
    """Return the first non-empty API key found in the environment."""
    env = os.environ if environ is None else environ
    for name in API_KEY_ENV_VARS:
        value = (env.get(name) or "").strip()
        if value:
            return value
    return None


@dataclass
class AppSettings:
    """Application settings"""

    # Upstream generative API
    api_base_url: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"
    translation_model: str = "gemini-1.5-flash"
    detection_model: str = "gemini-1.5-flash"
    request_timeout: Optional[float] = None   # Seconds; None = wait indefinitely

    # Credential (resolved from the environment, never persisted)
    api_key: Optional[str] = field(default=None, repr=False, compare=False)

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    # Translation defaults (user-changeable)
    default_source_language: str = AUTO_DETECT
    default_target_language: str = "es"

    # History
    max_history_entries: int = 10

    @classmethod
    def load(cls, path: Path, use_cache: bool = True) -> "AppSettings":
        """Load settings from template and user settings files.

        1. Read defaults from settings.template.json
        2. Apply USER_SETTINGS_KEYS from user_settings.json
        3. Resolve the API key from the environment

        Args:
            path: Base settings path (config/settings.json). Only its directory
                  is used to locate the template and user settings files.
            use_cache: Reuse a cached instance while files are unchanged.
        """
        config_dir = path.parent
        template_path = config_dir / "settings.template.json"
        user_settings_path = config_dir / "user_settings.json"

        cache_key = str(path.resolve())

        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0

        if use_cache:
            with _settings_cache_lock:
                if cache_key in _settings_cache:
                    cached_template_mtime, cached_user_mtime, cached_settings = _settings_cache[cache_key]
                    if cached_template_mtime == template_mtime and cached_user_mtime == user_mtime:
                        logger.debug("Using cached settings for: %s", path)
                        return cached_settings

        data = {}

        # 1. Load from template (developer defaults)
        if template_path.exists():
            try:
                with open(template_path, 'r', encoding='utf-8-sig') as f:
                    data = json.load(f)
                    logger.debug("Loaded template settings from: %s", template_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load template settings: %s", e)

        if not isinstance(data, dict):
            logger.warning("Settings template is not a JSON object, using defaults")
            data = {}

        # 2. Override with user settings
        if user_settings_path.exists():
            try:
                with open(user_settings_path, 'r', encoding='utf-8-sig') as f:
                    user_data = json.load(f)
                    for key in USER_SETTINGS_KEYS:
                        if key in user_data:
                            data[key] = user_data[key]
                    logger.debug("Loaded user settings from: %s", user_settings_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load user settings: %s", e)

        # The key must never come from a file
        data.pop('api_key', None)

        known_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        settings = cls(**filtered_data)
        settings.api_key = resolve_api_key()
        settings._validate()

        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, settings)

        return settings

    def _validate(self) -> None:
        """Validate and normalize setting values.

        Invalid values are reset to defaults with warnings.
        """
        if not isinstance(self.port, int) or not (1 <= self.port <= 65535):
            logger.warning("port out of range (%s), resetting to 8080", self.port)
            self.port = 8080

        if self.request_timeout is not None:
            try:
                timeout = float(self.request_timeout)
            except (TypeError, ValueError):
                timeout = 0.0
            if timeout <= 0:
                logger.warning("request_timeout invalid (%s), disabling timeout", self.request_timeout)
                self.request_timeout = None
            else:
                self.request_timeout = timeout

        if not isinstance(self.max_history_entries, int) or self.max_history_entries < 1:
            logger.warning("max_history_entries invalid (%s), resetting to 10", self.max_history_entries)
            self.max_history_entries = 10

        if self.default_source_language != AUTO_DETECT and not is_supported(self.default_source_language):
            logger.warning("Unsupported source language %r, resetting to auto", self.default_source_language)
            self.default_source_language = AUTO_DETECT

        if not is_supported(self.default_target_language):
            logger.warning("Unsupported target language %r, resetting to es", self.default_target_language)
            self.default_target_language = "es"

        self.api_base_url = self.api_base_url.rstrip('/')

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    @property
    def internal_api_url(self) -> str:
        """Base URL of this process's own HTTP endpoints."""
        host = "127.0.0.1" if self.host in ("0.0.0.0", "::") else self.host
        if ":" in host and not host.startswith("["):
            host = f"[{host}]"  # IPv6 literal
        return f"http://{host}:{self.port}"

    def save(self, path: Path) -> None:
        """Save user settings to user_settings.json.

        Only USER_SETTINGS_KEYS are written; the template is left untouched.
        The cache is refreshed afterwards.

        Args:
            path: Base settings path (config/settings.json)
        """
        config_dir = path.parent
        user_settings_path = config_dir / "user_settings.json"
        template_path = config_dir / "settings.template.json"

        config_dir.mkdir(parents=True, exist_ok=True)

        data = {}
        for key in USER_SETTINGS_KEYS:
            if hasattr(self, key):
                data[key] = getattr(self, key)

        with open(user_settings_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        logger.debug("Saved user settings to: %s", user_settings_path)

        cache_key = str(path.resolve())
        template_mtime = template_path.stat().st_mtime if template_path.exists() else 0.0
        user_mtime = user_settings_path.stat().st_mtime if user_settings_path.exists() else 0.0
        with _settings_cache_lock:
            _settings_cache[cache_key] = (template_mtime, user_mtime, self)


def get_default_settings_path() -> Path:
    """Get default settings file path"""
    return Path(__file__).parent.parent.parent / "config" / "settings.json"


def get_default_prompts_dir() -> Path:
    """Get default prompts directory"""
    return Path(__file__).parent.parent.parent / "prompts"


def invalidate_settings_cache(path: Optional[Path] = None) -> None:
    """Invalidate settings cache.

    Args:
        path: Clear only this path's entry; None clears everything.
    """
    with _settings_cache_lock:
        if path is None:
            _settings_cache.clear()
            logger.debug("Cleared all settings cache")
        else:
            cache_key = str(path.resolve())
            if cache_key in _settings_cache:
                del _settings_cache[cache_key]
                logger.debug("Cleared settings cache for: %s", path)
