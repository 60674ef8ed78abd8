import click
from ..utils import open_desk, reported_errors, format_money

@click.group()
def sweep():
    """Batch jobs across all students and loans"""
    pass

@sweep.command()
@click.option('--threshold', default=None, type=float, help='Unpaid total above which students are suspended (default: LENDING_SUSPENSION_THRESHOLD or 50)')
def suspend(threshold: float):
    """Suspend active students with too many unpaid penalties"""
    with open_desk() as (_, desk), reported_errors():
        result = desk.suspend_over_threshold(threshold)

    click.echo(click.style("\nThreshold: ", fg='blue') + click.style(format_money(result.threshold), fg='cyan'))
    for student_id in result.suspended_ids:
        click.echo(click.style(f"Suspended: student {student_id}", fg='red') +
                   click.style(f" (unpaid {format_money(result.unpaid_totals[student_id])})", fg='blue'))
    for student_id in result.already_suspended_ids:
        click.echo(click.style(f"Already suspended: student {student_id}", fg='yellow'))
    click.echo(click.style("\nTotal students suspended: ", fg='blue') +
               click.style(str(len(result.suspended_ids)), fg='cyan'))

@sweep.command()
def notify():
    """Log today's overdue notifications"""
    with open_desk() as (_, desk), reported_errors():
        result = desk.send_overdue_notifications()
    click.echo(click.style("\nOverdue notifications sent: ", fg='blue') +
               click.style(str(result.notified_count), fg='cyan'))

@sweep.command('mark-overdue')
def mark_overdue():
    """Flag open loans past their grace period as Overdue"""
    with open_desk() as (_, desk), reported_errors():
        marked = desk.mark_overdue()
    click.echo(click.style("\nLoans marked overdue: ", fg='blue') +
               click.style(str(len(marked)), fg='cyan'))
