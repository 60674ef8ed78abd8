import click
from decimal import Decimal, InvalidOperation
from lending.sa.database import transaction
from lending.sa.repositories.book import BookRepository
from lending.sa.repositories.student import StudentRepository
from ..utils import open_desk

@click.group()
def catalog():
    """Book, category and student records"""
    pass

@catalog.command('add-category')
@click.argument('name')
@click.argument('fee_rate')
def add_category(name: str, fee_rate: str):
    """Add a fee category charging FEE_RATE per overdue day

    Example:
        lending catalog add-category "Regular Book" 1
    """
    try:
        rate = Decimal(fee_rate)
    except InvalidOperation:
        raise click.BadParameter(f"'{fee_rate}' is not a number", param_hint='FEE_RATE')

    with open_desk() as (session, _):
        try:
            with transaction(session):
                category = BookRepository(session).create_category(name, rate)
                category_id = category.id
        except ValueError as e:
            click.echo(click.style(f"\n{e}", fg='red'), err=True)
            raise SystemExit(1)
    click.echo(click.style("\nCreated category ", fg='green') +
               click.style(f"{name} (ID: {category_id})", fg='cyan'))

@catalog.command('add-book')
@click.argument('title')
@click.option('--category', 'category_name', required=True, help='Fee category name')
@click.option('--author', default=None, help='Author name')
def add_book(title: str, category_name: str, author: str):
    """Add an available book

    Example:
        lending catalog add-book "Dune" --category "Regular Book" --author "Frank Herbert"
    """
    with open_desk() as (session, _):
        with transaction(session):
            books = BookRepository(session)
            category = books.get_category_by_name(category_name)
            if category is None:
                click.echo(click.style(f"\nUnknown category: {category_name}", fg='red'), err=True)
                raise SystemExit(1)
            book = books.create_book(title, category.id, author)
            book_id = book.id
    click.echo(click.style("\nCreated book ", fg='green') +
               click.style(f"{title} (ID: {book_id})", fg='cyan'))

@catalog.command('add-student')
@click.argument('name')
def add_student(name: str):
    """Add an active student"""
    with open_desk() as (session, _):
        with transaction(session):
            student = StudentRepository(session).create_student(name)
            student_id = student.id
    click.echo(click.style("\nCreated student ", fg='green') +
               click.style(f"{name} (ID: {student_id})", fg='cyan'))
