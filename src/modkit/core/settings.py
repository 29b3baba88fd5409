"""modkit tool configuration.

File conventions, the compiler executable, the platform artifact set and the
launcher stub are all settings rather than constants, so the same build core
can be pointed at a different toolchain through ``MODKIT_*`` environment
variables or a ``.env`` file.

Examples:
    >>> settings = ModkitSettings(source_suffix=".kt")
    >>> settings.source_suffix
    '.kt'

Tags:
    settings, configuration, pydantic, environment, modkit

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PLATFORM_ARTIFACTS = frozenset(
    {
        "java.base",
        "java.compiler",
        "java.desktop",
        "java.logging",
        "java.management",
        "java.naming",
        "java.net.http",
        "java.sql",
        "java.xml",
        "jdk.unsupported",
    }
)

# str.format template: literal shell braces are doubled.
DEFAULT_LAUNCHER_TEMPLATE = """\
#!/bin/bash

if java --version >/dev/null 2>/dev/null; then
  java=java
elif test -d "$JAVA_HOME"; then
  java="$JAVA_HOME"/bin/java
else
  echo "No java found in PATH, nor was JAVA_HOME set" >&2
  exit 2
fi

java_args=()
while [ "${{1:0:2}}" == -J ]; do
  java_args+=("${{1:2}}")
  shift
done

launcher_args=()
while [ "${{1:0:2}}" == -L ]; do
  launcher_args+=("${{1:2}}")
  shift
done

exec "$java" -cp "$0" "${{java_args[@]}}" {launcher_class} "${{launcher_args[@]}}" {module} {main_class} "$@"
"""


class ModkitSettings(BaseSettings):
    """modkit configuration.

    All fields can be set via ``MODKIT_*`` environment variables (e.g.
    ``MODKIT_COMPILER_EXECUTABLE=/opt/jdk/bin/javac``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="MODKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── File conventions ─────────────────────────────────────────
    source_suffix: str = Field(default=".java")
    output_suffix: str = Field(default=".class")
    nested_separator: str = Field(default="$", min_length=1)
    module_declaration: str = Field(default="module-info.java")
    descriptor_entry: str = Field(default="module-info.json")
    archive_suffix: str = Field(default=".jar")

    # ── Toolchain ────────────────────────────────────────────────
    compiler_executable: str = Field(default="javac")
    platform_artifacts: frozenset[str] = Field(default=DEFAULT_PLATFORM_ARTIFACTS)

    # ── Programs ─────────────────────────────────────────────────
    bundle_base: Path | None = Field(
        default=None,
        description="Launcher runtime archive every bundle is layered over",
    )
    launcher_class: str = Field(default="modkit.launcher.Main")
    launcher_template: str = Field(default=DEFAULT_LAUNCHER_TEMPLATE)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("source_suffix", "output_suffix", "archive_suffix")
    @classmethod
    def _suffix_has_dot(cls, value: str) -> str:
        if not value.startswith("."):
            raise ValueError(f"suffix must start with '.': {value!r}")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_log_format(cls, value: str) -> str:
        if value not in ("console", "json"):
            raise ValueError(f"log_format must be 'console' or 'json': {value!r}")
        return value

    @property
    def declaration_stem(self) -> str:
        """Stem the module declaration is whitelisted under."""
        return self.module_declaration.removesuffix(self.source_suffix)

    def render_launcher(self, module: str, main_class: str) -> bytes:
        """Launcher stub header for a program running ``main_class`` in ``module``."""
        text = self.launcher_template.format(
            launcher_class=self.launcher_class,
            module=module,
            main_class=main_class,
        )
        return text.encode("utf-8")


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, ModkitSettings] = {}


def get_settings(*, _force_reload: bool = False) -> ModkitSettings:
    """Load, validate, and cache the process-wide :class:`ModkitSettings`.

    Parameters
    ----------
    _force_reload:
        Bypass cache and re-read the environment.
    """
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]
    settings = ModkitSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()


__all__ = [
    "DEFAULT_PLATFORM_ARTIFACTS",
    "ModkitSettings",
    "get_settings",
    "clear_settings_cache",
]
