import json
import logging
from pathlib import Path

import click

from .cli_utils import reconstruct_command_line
from .pipeline import (
    AtomicWriter,
    AttributeExpander,
    DispatchConfig,
    DispatchError,
    DispatchGenerator,
    ErrorMode,
    OutputMode,
    OutputValidationError,
)


def _load_config(config_path, format_code=False, force=False, compile_error=False) -> DispatchConfig:
    if config_path is not None:
        with open(config_path) as f:
            config = DispatchConfig.from_dict(json.load(f))
    else:
        config = DispatchConfig()

    # CLI flags override the config file when set
    if format_code:
        config.formatter.enabled = True
    if force:
        config.output.mode = OutputMode.FORCE
    if compile_error:
        config.on_error = ErrorMode.COMPILE_ERROR
    return config


def _write_output(code: str, output, config: DispatchConfig) -> None:
    if output is None or output == "-":
        click.echo(code, nl=False)
        return

    path = Path(output)
    try:
        if config.output.atomic_write:
            writer = AtomicWriter()
            validate = config.output.validate_before_write
            if config.output.mode == OutputMode.FORCE:
                writer.write(path, code, validate)
            else:
                writer.write_if_not_exists(path, code, validate)
        else:
            if path.exists() and config.output.mode != OutputMode.FORCE:
                raise FileExistsError(f"Output file already exists: {path}. Use --force to overwrite.")
            path.write_text(code, encoding="utf-8")
    except (FileExistsError, OutputValidationError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every pipeline stage")
def dispatch_codegen(verbose):
    """Generate a trait from a method signature and dispatch it over a Rust enum."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@dispatch_codegen.command()
@click.option("--signature", "-s", required=True, type=str, help="Method signature, e.g. 'fn run(self)'")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--trait-visibility", default=None, type=str, help="Visibility of the generated trait, e.g. 'pub'")
@click.option("--binding", default=None, type=str, help="Name the payload is bound to in match arms")
@click.option("--compile-error", is_flag=True, default=False, help="Emit compile_error!(...) instead of failing")
@click.option("--format", "format_code", is_flag=True, default=False, help="Run rustfmt on the output")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing output file")
@click.option("--generation-comment", is_flag=True, default=False, help="Add a comment above the generated code")
@click.argument("item_path", type=click.Path(exists=True, allow_dash=True))
@click.argument("output", required=False, default=None, type=click.Path(allow_dash=True))
def generate(signature, config, trait_visibility, binding, compile_error, format_code, force, generation_comment, item_path, output):
    """Append the trait and dispatch impl to the enum in ITEM_PATH."""
    config = _load_config(config, format_code, force, compile_error)
    if trait_visibility is not None:
        config.trait_visibility = trait_visibility
    if binding is not None:
        config.payload_binding = binding
    if generation_comment:
        config.add_generation_comment = True

    with click.open_file(item_path, encoding="utf-8") as f:
        item_text = f.read()

    generator = DispatchGenerator(config, command_line=reconstruct_command_line(generate))
    try:
        code = generator.expand(item_text, signature)
    except DispatchError as e:
        if e.span is not None and e.span.source == "item" and item_path != "-":
            e.span = e.span.relocate(item_path, 0, 0, 0)
        raise click.ClickException(str(e)) from e

    _write_output(code, output, config)


@dispatch_codegen.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--compile-error", is_flag=True, default=False, help="Emit compile_error!(...) instead of failing")
@click.option("--format", "format_code", is_flag=True, default=False, help="Run rustfmt on the output")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing output file")
@click.option("--check", is_flag=True, default=False, help="Only report whether PATH has attributes to expand")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.argument("output", required=False, default=None, type=click.Path(allow_dash=True))
def expand(config, compile_error, format_code, force, check, path, output):
    """Expand every #[clap_dispatch(...)] enum in PATH."""
    config = _load_config(config, format_code, force, compile_error)

    source = Path(path).read_text(encoding="utf-8")
    expander = AttributeExpander(config)
    try:
        code = expander.expand_source(source, path)
    except DispatchError as e:
        raise click.ClickException(str(e)) from e

    if check:
        if code != source:
            click.echo(f"would expand {path}")
            raise SystemExit(1)
        return

    _write_output(code, output, config)


if __name__ == "__main__":
    dispatch_codegen()
