"""clipnote configuration loader.

Priority (high → low):
  1. CLI flags           (handled at call site — not in this module)
  2. Environment variables  (CLIPNOTE_GENERATION_MODEL, CLIPNOTE_OFFLINE)
  3. Per-project clipnote.yaml  (current working directory)
  4. Global ~/.clipnote/config.yaml  (model defaults only — no API keys)
  5. Hardcoded defaults

Global config must never contain API keys; use environment variables instead.
All YAML reads use yaml.safe_load() — never yaml.load().
"""

from __future__ import annotations

import os
import re
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_GLOBAL_CONFIG_DIR: Path = Path.home() / ".clipnote"
_GLOBAL_CONFIG_PATH: Path = _GLOBAL_CONFIG_DIR / "config.yaml"
_PROJECT_CONFIG_NAME: str = "clipnote.yaml"

# Key names that look like credentials; forbidden in global config.
# Does NOT match legitimate keys like summary_max_tokens or chat_max_tokens.
_API_KEY_RE: re.Pattern[str] = re.compile(
    r"api[_\-]?(?:key|secret)"
    r"|_token$"
    r"|^token$"
    r"|_secret$"
    r"|^secret$"
    r"|passw(?:ord|d)"
    r"|credential",
    re.IGNORECASE,
)

_KNOWN_SECTIONS: frozenset[str] = frozenset(["generation", "summary", "tagging", "search"])

_TRUTHY: frozenset[str] = frozenset(["1", "true", "yes", "on"])


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a config file contains an invalid or forbidden value."""


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass
class GenerationCfg:
    """LLM tier configuration (clipnote.yaml: generation:).

    Attributes:
        model: LiteLLM model string used for summaries and chat answers.
        enabled: When False the local heuristics are always used.
        summary_max_tokens: Output budget for LLM summaries.
        chat_max_tokens: Output budget for chat answers.
        summary_temperature: Sampling temperature for summaries.
        chat_temperature: Sampling temperature for chat answers.
        timeout: Per-request timeout in seconds.
    """

    model: str = "openrouter/meta-llama/llama-3.1-8b-instruct"
    enabled: bool = True
    summary_max_tokens: int = 500
    chat_max_tokens: int = 1000
    summary_temperature: float = 0.3
    chat_temperature: float = 0.7
    timeout: float = 30.0


@dataclass
class SummaryCfg:
    """Local summary bounds (clipnote.yaml: summary:)."""

    max_length: int = 500
    short_text_limit: int = 500


@dataclass
class TaggingCfg:
    """Tag list bounds (clipnote.yaml: tagging:)."""

    min_tags: int = 3
    max_tags: int = 6


@dataclass
class SearchCfg:
    """Relevance search configuration (clipnote.yaml: search:)."""

    top_k: int = 5


@dataclass
class ClipnoteConfig:
    """Root configuration object, built by load_config() from merged YAML layers."""

    generation: GenerationCfg = field(default_factory=GenerationCfg)
    summary: SummaryCfg = field(default_factory=SummaryCfg)
    tagging: TaggingCfg = field(default_factory=TaggingCfg)
    search: SearchCfg = field(default_factory=SearchCfg)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_no_api_keys(data: dict[str, Any], source: Path) -> None:
    """Raise ConfigError if *data* contains any API-key-like key names."""

    def _scan(obj: Any, path: str) -> None:
        if isinstance(obj, dict):
            for k, v in obj.items():
                full = f"{path}.{k}" if path else k
                if _API_KEY_RE.search(str(k)):
                    raise ConfigError(
                        f"Global config '{source}' contains a forbidden key '{full}'.\n"
                        f"  API keys must be set via environment variables, not config files.\n"
                        f"  Remove '{full}' from {source.name} and use:\n"
                        f"    export {str(k).upper().replace('-', '_')}=<value>"
                    )
                _scan(v, full)

    _scan(data, "")


def _warn_unknown_keys(data: dict[str, Any], source: Path) -> None:
    """Emit a UserWarning for unrecognised top-level keys."""
    for key in data:
        if key not in _KNOWN_SECTIONS:
            warnings.warn(
                f"Unknown config key '{key}' in '{source}' — ignored.",
                UserWarning,
                stacklevel=4,
            )


def _validate(cfg: ClipnoteConfig) -> None:
    if cfg.tagging.min_tags < 1:
        raise ConfigError(f"tagging.min_tags must be >= 1, got {cfg.tagging.min_tags}")
    if cfg.tagging.max_tags < cfg.tagging.min_tags:
        raise ConfigError(
            f"tagging.max_tags ({cfg.tagging.max_tags}) must be >= "
            f"tagging.min_tags ({cfg.tagging.min_tags})"
        )
    if cfg.search.top_k < 1:
        raise ConfigError(f"search.top_k must be >= 1, got {cfg.search.top_k}")
    if cfg.summary.max_length < 50:
        raise ConfigError(f"summary.max_length must be >= 50, got {cfg.summary.max_length}")


# ---------------------------------------------------------------------------
# Merge + build
# ---------------------------------------------------------------------------


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new dict that is *base* deep-merged with *override*."""
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _cfg_from_dict(data: dict[str, Any]) -> ClipnoteConfig:
    """Build a *ClipnoteConfig* from a merged raw YAML dict."""
    cfg = ClipnoteConfig()

    if "generation" in data:
        g = data["generation"] or {}
        d = cfg.generation
        cfg.generation = GenerationCfg(
            model=str(g.get("model", d.model)),
            enabled=bool(g.get("enabled", d.enabled)),
            summary_max_tokens=int(g.get("summary_max_tokens", d.summary_max_tokens)),
            chat_max_tokens=int(g.get("chat_max_tokens", d.chat_max_tokens)),
            summary_temperature=float(g.get("summary_temperature", d.summary_temperature)),
            chat_temperature=float(g.get("chat_temperature", d.chat_temperature)),
            timeout=float(g.get("timeout", d.timeout)),
        )

    if "summary" in data:
        s = data["summary"] or {}
        cfg.summary = SummaryCfg(
            max_length=int(s.get("max_length", cfg.summary.max_length)),
            short_text_limit=int(s.get("short_text_limit", cfg.summary.short_text_limit)),
        )

    if "tagging" in data:
        t = data["tagging"] or {}
        cfg.tagging = TaggingCfg(
            min_tags=int(t.get("min_tags", cfg.tagging.min_tags)),
            max_tags=int(t.get("max_tags", cfg.tagging.max_tags)),
        )

    if "search" in data:
        r = data["search"] or {}
        cfg.search = SearchCfg(top_k=int(r.get("top_k", cfg.search.top_k)))

    return cfg


def _apply_env_overrides(cfg: ClipnoteConfig) -> ClipnoteConfig:
    """Apply CLIPNOTE_* environment variable overrides."""
    if model := os.environ.get("CLIPNOTE_GENERATION_MODEL"):
        cfg.generation.model = model
    if os.environ.get("CLIPNOTE_OFFLINE", "").strip().lower() in _TRUTHY:
        cfg.generation.enabled = False
    return cfg


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(
    project_dir: Path | None = None,
    *,
    global_config_path: Path | None = None,
) -> ClipnoteConfig:
    """Load and return a merged *ClipnoteConfig*.

    Applies layers in order: global → per-project → env vars.
    CLI flag overrides must be applied by the caller after this function.

    Args:
        project_dir: Directory to search for *clipnote.yaml*. Defaults to CWD.
        global_config_path: Override the global config path (for testing).

    Returns:
        Fully merged *ClipnoteConfig* with env var overrides applied.

    Raises:
        ConfigError: If global config contains API-key-like fields, or a value
            is out of range.
    """
    global_path = global_config_path if global_config_path is not None else _GLOBAL_CONFIG_PATH
    search_dir = project_dir if project_dir is not None else Path.cwd()

    merged: dict[str, Any] = {}

    if global_path.exists():
        raw_global = yaml.safe_load(global_path.read_text(encoding="utf-8")) or {}
        _check_no_api_keys(raw_global, global_path)
        _warn_unknown_keys(raw_global, global_path)
        merged = _deep_merge(merged, raw_global)

    project_cfg_path = search_dir / _PROJECT_CONFIG_NAME
    if project_cfg_path.exists():
        raw_project = yaml.safe_load(project_cfg_path.read_text(encoding="utf-8")) or {}
        _warn_unknown_keys(raw_project, project_cfg_path)
        merged = _deep_merge(merged, raw_project)

    cfg = _cfg_from_dict(merged)
    _validate(cfg)

    return _apply_env_overrides(cfg)


def write_project_config(project_dir: Path) -> Path:
    """Write a commented default ``clipnote.yaml`` into *project_dir* if missing.

    Returns:
        Path to the project config file.
    """
    target = project_dir / _PROJECT_CONFIG_NAME
    if not target.exists():
        defaults = ClipnoteConfig()
        content = (
            "# clipnote project configuration.\n"
            "# NEVER store API keys here — use environment variables:\n"
            "#   export OPENROUTER_API_KEY=sk-or-...\n"
            "\n"
            "generation:\n"
            f"  model: {defaults.generation.model}\n"
            "  enabled: true\n"
            "\n"
            "tagging:\n"
            f"  min_tags: {defaults.tagging.min_tags}\n"
            f"  max_tags: {defaults.tagging.max_tags}\n"
            "\n"
            "search:\n"
            f"  top_k: {defaults.search.top_k}\n"
        )
        target.write_text(content, encoding="utf-8")
    return target
