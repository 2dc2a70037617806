"""
Main CLI entry point for the CSV serialization library (Click implementation).
"""

import click

from csv_serialization import __version__
from csv_serialization.cli.commands_click import check, config_commands, convert, header, preview


@click.group()
@click.version_option(version=__version__, message='CSV Serialization v%(version)s')
def main():
    """CSV Serialization - Map CSV files to typed dataclass records and back."""
    pass


# Add commands
main.add_command(header)
main.add_command(check)
main.add_command(preview)
main.add_command(convert)
main.add_command(config_commands, name='config')


if __name__ == '__main__':
    main()
