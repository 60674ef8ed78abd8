import click
from lending.sa.database import transaction
from lending.sa.repositories.penalty import PenaltyRepository
from ..utils import open_desk, reported_errors, format_money

@click.group()
def penalty():
    """Late fee commands"""
    pass

@penalty.command()
@click.argument('borrowing_id', type=int)
def settle(borrowing_id: int):
    """Compute and record the late fee for BORROWING_ID"""
    with open_desk() as (_, desk), reported_errors():
        amount = desk.settle_penalty(borrowing_id)
    click.echo(click.style("\nPenalty: ", fg='blue') +
               click.style(format_money(amount), fg='red' if amount > 0 else 'green'))

@penalty.command()
@click.argument('penalty_id', type=int)
def pay(penalty_id: int):
    """Mark PENALTY_ID as paid"""
    with open_desk() as (session, _):
        with transaction(session):
            paid = PenaltyRepository(session).mark_paid(penalty_id)
    if paid is None:
        click.echo(click.style(f"\nPenalty {penalty_id} not found", fg='red'), err=True)
        raise SystemExit(1)
    click.echo(click.style(f"\nPenalty {penalty_id} marked paid", fg='green'))
