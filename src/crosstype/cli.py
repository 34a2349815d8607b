"""crosstype CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import click

from crosstype import __version__
from crosstype.config import CrosstypeConfig, find_config, load_config
from crosstype.errors import Diagnostic, DiagnosticRenderer, EmitError, IOFailure
from crosstype.language import Language
from crosstype.loader import load_module
from crosstype.reasonml import ReasonML
from crosstype.typescript import TypeScript

LANGUAGES: dict[str, type[Language]] = {
    "reasonml": ReasonML,
    "typescript": TypeScript,
}


@dataclass
class GenerateResult:
    written: list[Path] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


def _resolve_config(config_path: str | None) -> CrosstypeConfig:
    if config_path is not None:
        return load_config(Path(config_path))
    try:
        return load_config(find_config())
    except FileNotFoundError:
        return CrosstypeConfig()


def _is_plain_file_name(name: str) -> bool:
    return bool(name) and name not in (".", "..") and not any(c in name for c in "/\\")


def generate_files(
    language: Language, ir_files: list[Path], output_dir: Path | None,
) -> GenerateResult:
    """Emit every IR file. A failed module is recorded and the rest still run."""
    result = GenerateResult()
    for ir_file in ir_files:
        try:
            module = load_module(ir_file)
            text = language.generate_text(module)
        except EmitError as e:
            result.diagnostics.append(e.to_diagnostic())
            continue
        if output_dir is None:
            click.echo(text, nl=False)
            continue
        if not _is_plain_file_name(module.name):
            result.diagnostics.append(IOFailure(
                f"module name `{module.name}` is not a plain file name", str(ir_file),
            ).to_diagnostic())
            continue
        out_path = output_dir / f"{module.name}.{language.file_extension}"
        try:
            out_path.write_text(text, encoding="utf-8")
        except OSError as e:
            result.diagnostics.append(IOFailure(str(e), str(out_path)).to_diagnostic())
            continue
        result.written.append(out_path)
    return result


@click.group()
@click.version_option(__version__, prog_name="crosstype")
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr.")
def main(verbose: bool) -> None:
    """Emit type declarations for other languages from a shared type IR."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


@main.command()
@click.argument("ir_files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--lang", "-l", "lang", required=True,
    type=click.Choice(sorted(LANGUAGES)), help="Output language.",
)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Path to crosstype.toml (default: search upward from cwd).")
@click.option("--no-version-header", is_flag=True, help="Omit the generated-by banner.")
@click.option("--output-dir", "-o", type=click.Path(file_okay=False),
              help="Write <module>.<ext> files here instead of stdout.")
def generate(
    ir_files: tuple[str, ...],
    lang: str,
    config_path: str | None,
    no_version_header: bool,
    output_dir: str | None,
) -> None:
    """Generate declarations for each IR_FILE."""
    try:
        config = _resolve_config(config_path)
    except (OSError, ValueError) as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)

    options = config.options_for(lang, no_version_header=True if no_version_header else None)
    language = LANGUAGES[lang](options)

    out_dir = None
    if output_dir is not None:
        out_dir = Path(output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

    result = generate_files(language, [Path(p) for p in ir_files], out_dir)

    for path in result.written:
        click.echo(f"wrote {path}")

    if not result.ok:
        renderer = DiagnosticRenderer(color=False)
        for diag in result.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)


@main.command()
def languages() -> None:
    """List the available output languages."""
    for name in sorted(LANGUAGES):
        click.echo(f"{name} (.{LANGUAGES[name].file_extension})")
