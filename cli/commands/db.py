import click
from lending.config import LendingSettings
from lending.sa.database import Database

@click.group()
def db():
    """Database commands"""
    pass

@db.command()
def init():
    """Create any missing tables on DATABASE_URL

    Example:
        lending db init
    """
    database = Database(lock_timeout=LendingSettings.from_env().lock_timeout)
    database.init_db()
    click.echo(click.style("\nSchema ready on ", fg='green') +
               click.style(database.connection_string, fg='cyan'))
