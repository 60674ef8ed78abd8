# cli/main.py
import click
from .commands.db import db
from .commands.catalog import catalog
from .commands.loan import loan
from .commands.penalty import penalty
from .commands.sweep import sweep
from .commands.report import report
from .utils import configure_logging

@click.group()
@click.option('--verbose/--no-verbose', default=False, help='Show debug logging')
def cli(verbose: bool):
    """Library lending CLI"""
    configure_logging(verbose)

cli.add_command(db)
cli.add_command(catalog)
cli.add_command(loan)
cli.add_command(penalty)
cli.add_command(sweep)
cli.add_command(report)

def main():
    """Entry point for the CLI"""
    cli()

if __name__ == '__main__':
    main()
