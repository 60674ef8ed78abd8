from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload
from lending.sa.models import Book, BookCategory, Availability

class BookRepository:
    """Repository for managing Book and BookCategory entities.

    Changes are flushed, never committed; the caller owns the transaction.
    """

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, book_id: int) -> Optional[Book]:
        """Get a book by its ID.

        Args:
            book_id: The ID of the book to retrieve

        Returns:
            The Book object if found, None otherwise
        """
        return self.session.query(Book).filter(Book.id == book_id).first()

    def get_for_update(self, book_id: int) -> Optional[Book]:
        """Get a book and lock its row until the transaction ends.

        Args:
            book_id: The ID of the book to lock

        Returns:
            The locked Book object if found, None otherwise
        """
        return (
            self.session.query(Book)
            .filter(Book.id == book_id)
            .with_for_update()
            .first()
        )

    def get_with_category(self, book_id: int) -> Optional[Book]:
        return (
            self.session.query(Book)
            .options(joinedload(Book.category))
            .filter(Book.id == book_id)
            .first()
        )

    def list_all(self) -> List[Book]:
        return self.session.query(Book).order_by(Book.id).all()

    def create_book(self, title: str, category_id: int, author: Optional[str] = None) -> Book:
        """Create a new, available book.

        Args:
            title: The title of the book
            category_id: The fee category of the book
            author: Optional author name

        Returns:
            The created Book object
        """
        book = Book(
            title=title,
            author=author,
            category_id=category_id,
            availability=Availability.AVAILABLE.value
        )
        self.session.add(book)
        self.session.flush()
        return book

    def set_availability(self, book: Book, availability: Availability) -> Book:
        book.availability = availability.value
        self.session.flush()
        return book

    def get_category_by_name(self, name: str) -> Optional[BookCategory]:
        return self.session.query(BookCategory).filter(BookCategory.name == name).first()

    def create_category(self, name: str, fee_rate: Decimal) -> BookCategory:
        """Create a new fee category.

        Args:
            name: Unique category name
            fee_rate: Fee charged per overdue day, must be positive

        Returns:
            The created BookCategory object

        Raises:
            ValueError: If the fee rate is not positive or the name is taken
        """
        fee_rate = Decimal(str(fee_rate))
        if fee_rate <= 0:
            raise ValueError(f"Fee rate must be positive, got {fee_rate}")
        if self.get_category_by_name(name):
            raise ValueError(f"Category with name '{name}' already exists")

        category = BookCategory(name=name, fee_rate=fee_rate)
        self.session.add(category)
        self.session.flush()
        return category
