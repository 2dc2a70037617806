"""
CLI commands for the CSV serialization library (Click implementation).
"""

import click
import importlib
import sys
import yaml
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

from csv_serialization.core.config import Config
from csv_serialization.core.exceptions import CsvSerializationError
from csv_serialization.serializer.serializer import CsvSerializer, serializer_for
from csv_serialization.utils.logging_config import setup_logging


def load_record_type(spec: str) -> type:
    """Import a record type named as 'package.module:ClassName'."""
    module_name, _, class_name = spec.partition(':')
    if not module_name or not class_name:
        raise click.BadParameter(f"Expected 'package.module:ClassName', got '{spec}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {e}")
    record_type = getattr(module, class_name, None)
    if record_type is None:
        raise click.BadParameter(f"Module '{module_name}' has no attribute '{class_name}'")
    return record_type


def build_serializer(record_type: str, config_path: Optional[str], separator: Optional[str],
                     no_line_numbers: bool, sequential: bool, verbose: bool) -> CsvSerializer:
    """Create a serializer from CLI options layered over the configuration file."""
    config = Config(config_path)
    logging_config = dict(config.logging_config)
    if verbose:
        logging_config['level'] = 'DEBUG'
    else:
        logging_config.setdefault('level', 'WARNING')
    setup_logging(logging_config)

    options = config.build_options()
    if separator:
        options.separator = separator
    if no_line_numbers:
        options.use_line_numbers = False
    if sequential:
        options.force_sequential = True
    return serializer_for(load_record_type(record_type), options)


def serializer_options(func):
    """Options shared by every command that works on a record type."""
    func = click.option('--verbose', '-v', is_flag=True,
                        help='Enable verbose output')(func)
    func = click.option('--sequential', is_flag=True,
                        help='Decode lines one at a time instead of in parallel')(func)
    func = click.option('--no-line-numbers', is_flag=True,
                        help='Files carry no leading row number column')(func)
    func = click.option('--separator', '-s', default=None,
                        help='Field separator character')(func)
    func = click.option('--config', '-c', 'config_path', default=None, type=click.Path(exists=True),
                        help='Path to YAML configuration file')(func)
    func = click.option('--record-type', '-t', required=True,
                        help="Record dataclass as 'package.module:ClassName'")(func)
    return func


@click.command()
@serializer_options
def header(record_type: str, config_path: Optional[str], separator: Optional[str],
           no_line_numbers: bool, sequential: bool, verbose: bool):
    """Print the CSV header of a record type."""
    try:
        serializer = build_serializer(record_type, config_path, separator,
                                      no_line_numbers, sequential, verbose)
        click.echo(serializer.get_type_header())
    except CsvSerializationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)


@click.command()
@click.option('--input', '-i', 'input_path', required=True, type=click.Path(exists=True),
              help='Path to input CSV file')
@serializer_options
def check(input_path: str, record_type: str, config_path: Optional[str], separator: Optional[str],
          no_line_numbers: bool, sequential: bool, verbose: bool):
    """Check the header of a CSV file against a record type."""
    try:
        serializer = build_serializer(record_type, config_path, separator,
                                      no_line_numbers, sequential, verbose)
        missing = serializer.get_file_header_diff(input_path)
    except CsvSerializationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    if missing:
        click.echo(f"❌ Header mismatch, missing columns: {missing}", err=True)
        sys.exit(1)
    click.echo("✅ Header matches")


@click.command()
@click.option('--input', '-i', 'input_path', required=True, type=click.Path(exists=True),
              help='Path to input CSV file')
@click.option('--keyword', '-k', 'keywords', multiple=True,
              help='Only read lines containing this keyword (repeatable)')
@click.option('--limit', '-n', default=20, type=int,
              help='Maximum number of records to show')
@serializer_options
def preview(input_path: str, keywords: Tuple[str, ...], limit: int, record_type: str,
            config_path: Optional[str], separator: Optional[str], no_line_numbers: bool,
            sequential: bool, verbose: bool):
    """Decode a CSV file and print its records as a table."""
    try:
        serializer = build_serializer(record_type, config_path, separator,
                                      no_line_numbers, sequential, verbose)
        records = serializer.deserialize(input_path, list(keywords) or None)
    except CsvSerializationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    if not records:
        click.echo("No records found")
        return

    frame = serializer.to_dataframe(records[:limit])
    with pd.option_context('display.max_columns', None, 'display.width', 200):
        click.echo(frame.to_string(index=False))
    if len(records) > limit:
        click.echo(f"... {len(records) - limit} more records")


@click.command()
@click.option('--input', '-i', 'input_path', required=True, type=click.Path(exists=True),
              help='Path to input CSV file')
@click.option('--output', '-o', 'output_path', required=True, type=click.Path(),
              help='Path to output CSV file')
@click.option('--keyword', '-k', 'keywords', multiple=True,
              help='Only convert lines containing this keyword (repeatable)')
@click.option('--eof', is_flag=True,
              help='Append an EOF marker row to the output')
@serializer_options
def convert(input_path: str, output_path: str, keywords: Tuple[str, ...], eof: bool,
            record_type: str, config_path: Optional[str], separator: Optional[str],
            no_line_numbers: bool, sequential: bool, verbose: bool):
    """Read records from a CSV file and write them to a new CSV file."""
    try:
        serializer = build_serializer(record_type, config_path, separator,
                                      no_line_numbers, sequential, verbose)
        records = serializer.deserialize(input_path, list(keywords) or None)

        if eof:
            serializer.options.use_eof_literal = True
        if Path(output_path).exists() and verbose:
            click.echo(f"⚠️  Warning: Output file already exists and will be replaced: {output_path}")
        serializer.serialize(output_path, records)
    except CsvSerializationError as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)

    status_msg = click.style("✅ SUCCESS", fg="green", bold=True)
    click.echo(f"{status_msg}: Wrote {len(records)} records to {output_path}")


@click.group()
def config_commands():
    """Configuration management commands."""
    pass


@config_commands.command('show')
@click.option('--config', '-c', 'config_path', default='config/config.yaml', type=click.Path(),
              help='Path to YAML configuration file')
def config_show(config_path: str):
    """Show current configuration."""
    try:
        config = Config(config_path)
    except (FileNotFoundError, CsvSerializationError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)

    click.echo("Current Configuration:")
    click.echo(yaml.dump(config.get_all(), default_flow_style=False, sort_keys=False))


@config_commands.command('validate')
@click.option('--config', '-c', 'config_path', default='config/config.yaml', type=click.Path(),
              help='Path to YAML configuration file')
def config_validate(config_path: str):
    """Validate configuration file."""
    try:
        Config(config_path).validate()
    except (FileNotFoundError, CsvSerializationError) as e:
        click.echo(f"❌ Configuration validation failed: {e}", err=True)
        sys.exit(1)
    click.echo("✅ Configuration is valid")


@config_commands.command('example')
def config_example():
    """Show example configuration."""
    example_config = {
        'csv': {
            'separator': ',',
            'use_line_numbers': True,
            'use_eof_literal': False,
            'ignore_empty_lines': True,
            'ignore_reference_types_except_string': True,
            'row_number_column_title': 'RowNumber',
            'force_sequential': False,
            'max_workers': 4,
            'encoding': 'utf-8'
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'file': 'logs/csv_serialization.log'
        }
    }

    click.echo("Example Configuration:")
    click.echo(yaml.dump(example_config, default_flow_style=False, sort_keys=False))
    click.echo("\nTo use this configuration:")
    click.echo("1. Save to config/config.yaml")
    click.echo("2. Pass it with --config config/config.yaml")
