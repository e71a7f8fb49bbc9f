import json
import logging
from pathlib import Path

import click

from .compiler import compile_json_schema_file
from .config import CompilerConfig, OutputMode
from .exceptions import SchemaError
from .printer import SchemaPrinter
from .writer import AtomicWriter


def _load_config(config_path):
    if config_path is None:
        return CompilerConfig()
    with open(config_path) as f:
        return CompilerConfig.from_dict(json.load(f))


def _compile(path, config):
    try:
        return compile_json_schema_file(path, config)
    except SchemaError as e:
        raise click.ClickException(f"{path}: {e}") from e


def _write(path: Path, content: str, config: CompilerConfig):
    output = config.output
    try:
        if output.atomic_write:
            writer = AtomicWriter()
            if output.mode == OutputMode.ERROR_IF_EXISTS:
                writer.write_if_not_exists(path, content, validate=output.validate_before_write)
            else:
                writer.write(path, content, validate=output.validate_before_write)
        else:
            if output.mode == OutputMode.ERROR_IF_EXISTS and path.exists():
                raise FileExistsError(f"Output file already exists: {path}. Use force mode to overwrite.")
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write(content)
    except (FileExistsError, SchemaError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--verbose", "-v", is_flag=True, default=False, help="Trace every build event")
@click.pass_context
def avro_schema_compiler(ctx, config, verbose):
    """Compile and inspect Avro JSON schemas."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    ctx.obj = _load_config(config)


@avro_schema_compiler.command("compile")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite an existing output file")
@click.option("--compact", is_flag=True, default=False, help="Write JSON without indentation")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, required=False, type=click.Path(resolve_path=True))
@click.pass_obj
def compile_command(config, force, compact, path, output):
    """Compile PATH and print its canonical JSON, or write it to OUTPUT."""
    if force:
        config.output.mode = OutputMode.FORCE
    if compact:
        config.output.indent = None

    schema = _compile(path, config)
    out = schema.to_json(indent=config.output.indent)

    if output is None:
        click.echo(out)
    else:
        _write(Path(output), out + "\n", config)


@avro_schema_compiler.command("info")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.pass_obj
def info_command(config, path):
    """Print an outline of the schema in PATH."""
    schema = _compile(path, config)
    click.echo(schema.basic_info(), nl=False)


@avro_schema_compiler.command("split")
@click.option("--force", "-f", is_flag=True, default=False, help="Overwrite existing files")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("directory", type=click.Path(file_okay=False, resolve_path=True))
@click.pass_obj
def split_command(config, force, path, directory):
    """Write every named type in PATH to DIRECTORY/<full name>.avsc."""
    if force:
        config.output.mode = OutputMode.FORCE

    schema = _compile(path, config)
    printer = SchemaPrinter(indent=config.output.indent)
    for full_name, node in schema.named_types().items():
        target = Path(directory) / f"{full_name}.avsc"
        _write(target, printer.to_json(node) + "\n", config)
        click.echo(str(target))


@avro_schema_compiler.command("resolve")
@click.argument("writer", type=click.Path(exists=True, resolve_path=True))
@click.argument("reader", type=click.Path(exists=True, resolve_path=True))
@click.pass_obj
def resolve_command(config, writer, reader):
    """Print whether data written with WRITER can be read with READER."""
    writer_schema = _compile(writer, config)
    reader_schema = _compile(reader, config)
    try:
        resolution = writer_schema.resolve(reader_schema)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e
    click.echo(resolution.value)
