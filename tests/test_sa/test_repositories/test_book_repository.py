import pytest
from decimal import Decimal
from lending.sa.models import Availability
from lending.sa.repositories.book import BookRepository

@pytest.fixture
def repo(db_session):
    return BookRepository(db_session)

def test_get_by_id(repo, sample_book):
    """Test fetching a book by ID"""
    book = repo.get_by_id(sample_book.id)
    assert book is not None
    assert book.title == "Test Book"

def test_get_by_id_not_found(repo):
    assert repo.get_by_id(99999) is None

def test_get_for_update(repo, sample_book):
    """Test fetching a book with a row lock"""
    book = repo.get_for_update(sample_book.id)
    assert book.id == sample_book.id

def test_get_with_category(repo, sample_book):
    """Test fetching a book with its fee category loaded"""
    book = repo.get_with_category(sample_book.id)
    assert book.category.fee_rate == Decimal("1.00")

def test_list_all_ordered_by_id(repo, multiple_books):
    books = repo.list_all()
    assert [b.id for b in books] == sorted(b.id for b in multiple_books)

def test_create_book(repo, db_session, regular_category):
    """Test creating an available book"""
    book = repo.create_book("New Book", regular_category.id, author="New Author")
    db_session.commit()

    assert book.id is not None
    assert book.author == "New Author"
    assert book.availability == Availability.AVAILABLE

def test_set_availability(repo, db_session, sample_book):
    repo.set_availability(sample_book, Availability.BORROWED)
    db_session.commit()
    db_session.expire_all()

    assert repo.get_by_id(sample_book.id).availability == Availability.BORROWED

def test_create_category(repo, db_session):
    """Test creating a fee category"""
    category = repo.create_category("Magazine", Decimal("0.50"))
    db_session.commit()

    assert repo.get_category_by_name("Magazine").id == category.id

def test_create_category_duplicate_name(repo, regular_category):
    """Test a duplicate category name is rejected"""
    with pytest.raises(ValueError, match="already exists"):
        repo.create_category("Regular Book", Decimal("2"))

def test_create_category_non_positive_rate(repo):
    with pytest.raises(ValueError, match="must be positive"):
        repo.create_category("Free Book", Decimal("0"))
