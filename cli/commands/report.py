import click
from ..utils import open_desk, reported_errors, format_when, format_money, print_heading, print_field

@click.group()
def report():
    """Read-only reports"""
    pass

@report.command()
@click.argument('student_id', type=int)
def history(student_id: int):
    """Borrowing history of STUDENT_ID"""
    with open_desk() as (_, desk), reported_errors():
        lines = desk.borrowing_history(student_id)

        print_heading(f"BORROWING HISTORY: student {student_id}")
        for line in lines:
            click.echo(click.style(f"Book: {line.book_title}", fg='cyan'))
            print_field("Borrow Date", format_when(line.borrowed_at))
            print_field("Return Date", format_when(line.returned_at))
            print_field("Status", line.status)
            print_field("Return Status", line.return_status,
                        'red' if line.return_status in ("Overdue", "Returned Late") else 'green')
            print_field("Penalty", format_money(line.penalty_total))
        if not lines:
            click.echo(click.style("No borrowing records found for this student.", fg='yellow'))
        else:
            click.echo(click.style(f"\nTotal Records: {len(lines)}", fg='blue'))

@report.command()
def availability():
    """Availability of every book"""
    with open_desk() as (_, desk):
        result = desk.availability_report()

        print_heading("BOOKS AVAILABILITY REPORT")
        for line in result.lines:
            click.echo(click.style(f"Book ID: {line.book_id}", fg='cyan'))
            print_field("Title", line.title)
            print_field("Author", line.author or "Unknown")
            if line.borrower_id is None:
                print_field("Status", "Available", 'green')
                continue
            print_field("Status", "Borrowed", 'yellow')
            print_field("Borrower", f"{line.borrower_name} (ID: {line.borrower_id})")
            print_field("Borrow Date", format_when(line.borrowed_at))
            if line.is_overdue:
                print_field("Overdue Days", line.overdue_days, 'red')

        click.echo(click.style("\nSUMMARY", fg='blue'))
        print_field("Total Books", result.total)
        print_field("Available", result.available_count)
        print_field("Borrowed (On Time)", result.borrowed_on_time_count)
        print_field("Overdue", result.overdue_count)
