"""Command-line interface for gql-iface."""

import importlib
import logging
import os
import shutil
import sys
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click

from .core.parser import SchemaParser
from .core.validation import validate_schema


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    if archive_path.suffix == ".zip":
        with zipfile.ZipFile(archive_path, "r") as zip_ref:
            zip_ref.extractall(temp_dir)
    elif archive_path.name.endswith((".tar.gz", ".tgz")):
        with tarfile.open(archive_path, "r:gz") as tar_ref:
            tar_ref.extractall(temp_dir)
    else:
        shutil.rmtree(temp_dir)
        raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    return temp_dir


def load_functions(module_name: str) -> tuple[dict, dict]:
    """Import a module exposing `resolvers` and `type_checks` mappings.

    The working directory is put on sys.path first, so a module in the
    directory the tool runs from can be used without installing it.
    """
    cwd = os.getcwd()
    if cwd not in sys.path:
        sys.path.insert(0, cwd)
    module = importlib.import_module(module_name)
    return dict(getattr(module, "resolvers", {})), dict(getattr(module, "type_checks", {}))


@click.group()
@click.version_option(package_name="gql-iface")
def main():
    """Interface resolution and implementation checks for GraphQL schemas."""
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--functions",
    "-f",
    "functions_module",
    default=None,
    help=(
        "Module defining `resolvers` and `type_checks` dicts keyed by type name. "
        "Looked up on sys.path and in the current directory."
    ),
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def check(schema: str, functions_module: str | None, output_format: str, verbose: bool):
    """Check that every interface is resolvable and correctly implemented.

    SDL carries no resolver code. Without --functions only field
    implementations are checked; with it, resolve_type functions and
    is_type_of predicates are bound and resolvability is checked too.
    Pass --format json to get the raw report.

    Examples:

        gql-iface check --schema ./schema

        gql-iface check -s ./schema.tgz --format json

        gql-iface check -s ./schema -f myapp.type_resolution
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    schema_path = Path(schema).resolve()
    temp_dir = None

    try:
        # Handle archives
        actual_schema_path = schema_path
        if schema_path.is_file() and schema_path.name.lower().endswith(
            (".zip", ".tar.gz", ".tgz")
        ):
            if output_format == "text":
                click.echo(f"Extracting archive {schema_path.name}...")
            temp_dir = extract_archive(schema_path)
            actual_schema_path = Path(temp_dir)

        resolvers, type_checks = {}, {}
        if functions_module:
            resolvers, type_checks = load_functions(functions_module)

        parser = SchemaParser(
            str(actual_schema_path), resolvers=resolvers, type_checks=type_checks
        )
        ir = parser.parse_all()
        report = validate_schema(ir, check_resolvable=functions_module is not None)

        if output_format == "json":
            click.echo(report.model_dump_json(indent=2))
        else:
            if verbose:
                click.echo(f"  Interfaces: {report.interfaces_checked}")
                click.echo(f"  Implementations: {report.implementations_checked}")
            for message in report.messages():
                click.echo(message, err=True)
            if report.ok:
                click.echo("Schema OK.")
            else:
                click.echo(f"Found {len(report.violations)} problem(s).", err=True)

        if not report.ok:
            raise SystemExit(1)
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)


if __name__ == "__main__":
    main()
