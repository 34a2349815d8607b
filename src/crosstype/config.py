"""TOML config loading for crosstype.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from crosstype.language import LanguageOptions

CONFIG_FILENAME = "crosstype.toml"


@dataclass
class OutputConfig:
    no_version_header: bool = False


@dataclass
class LanguageConfig:
    type_mappings: dict[str, str] = field(default_factory=dict)


@dataclass
class CrosstypeConfig:
    output: OutputConfig = field(default_factory=OutputConfig)
    languages: dict[str, LanguageConfig] = field(default_factory=dict)

    def options_for(
        self, lang: str, *, no_version_header: bool | None = None,
    ) -> LanguageOptions:
        """Freeze the settings for one backend. ``no_version_header`` overrides the file."""
        lang_config = self.languages.get(lang, LanguageConfig())
        if no_version_header is None:
            no_version_header = self.output.no_version_header
        return LanguageOptions.build(
            lang_config.type_mappings, no_version_header=no_version_header,
        )


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find crosstype.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> CrosstypeConfig:
    """Parse a crosstype.toml file into a CrosstypeConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = CrosstypeConfig()

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            no_version_header=out.get("no_version_header", False),
        )

    for lang, table in data.items():
        if lang == "output" or not isinstance(table, dict):
            continue
        mappings = table.get("type_mappings", {})
        bad = [k for k, v in mappings.items() if not isinstance(v, str)]
        if bad:
            raise ValueError(
                f"{path}: [{lang}.type_mappings] values must be strings: {', '.join(bad)}"
            )
        config.languages[lang] = LanguageConfig(type_mappings=dict(mappings))

    return config
