import click
from ..utils import open_desk, reported_errors, format_money

@click.group()
def loan():
    """Borrowing and returning books"""
    pass

@loan.command()
@click.argument('student_id', type=int)
@click.argument('book_id', type=int)
def borrow(student_id: int, book_id: int):
    """Lend BOOK_ID to STUDENT_ID"""
    with open_desk() as (_, desk), reported_errors():
        record = desk.borrow(student_id, book_id)
        click.echo(click.style("\nBorrowed. Borrowing record ID: ", fg='green') +
                   click.style(str(record.id), fg='cyan'))

@loan.command('return')
@click.argument('student_id', type=int)
@click.argument('borrowing_ids', type=int, nargs=-1, required=True)
def return_books(student_id: int, borrowing_ids: tuple):
    """Return one or more loans of STUDENT_ID as a single batch

    Either every loan is returned or none is.

    Example:
        lending loan return 1 4 7 9
    """
    with open_desk() as (_, desk), reported_errors():
        result = desk.return_books(student_id, list(borrowing_ids))

    if result.unpaid_before > 0:
        click.echo(click.style("\nWarning: unpaid penalties before this return: ", fg='yellow') +
                   click.style(format_money(result.unpaid_before), fg='yellow'))
    for borrowing_id, amount in result.penalties.items():
        click.echo(click.style(f"Record {borrowing_id}: penalty ", fg='blue') +
                   click.style(format_money(amount), fg='red'))
    for borrowing_id in result.skipped_ids:
        click.echo(click.style(f"Record {borrowing_id} already returned, skipped", fg='yellow'))
    click.echo(click.style("\nReturned: ", fg='green') +
               click.style(str(result.returned_count), fg='cyan') +
               click.style(" book(s)", fg='green'))

@loan.command()
def count():
    """Number of books currently borrowed"""
    with open_desk() as (_, desk):
        click.echo(desk.currently_borrowed_count())

@loan.command()
@click.argument('borrowing_id', type=int)
@click.confirmation_option(prompt='Delete this borrowing record?')
def delete(borrowing_id: int):
    """Delete a borrowing record (audited)"""
    with open_desk() as (_, desk), reported_errors():
        desk.delete_record(borrowing_id)
    click.echo(click.style(f"\nDeleted borrowing record {borrowing_id}", fg='green'))
