from typing import List, Optional
from sqlalchemy.orm import Session
from lending.sa.models import Student, MembershipStatus

class StudentRepository:
    """Repository for managing Student entities."""

    def __init__(self, session: Session):
        """Initialize the repository with a database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.session.query(Student).filter(Student.id == student_id).first()

    def get_for_update(self, student_id: int) -> Optional[Student]:
        """Get a student and lock the row until the transaction ends.

        Locking the student serializes every borrow for that student, which
        protects the count of their open loans.

        Args:
            student_id: The ID of the student to lock

        Returns:
            The locked Student object if found, None otherwise
        """
        return (
            self.session.query(Student)
            .filter(Student.id == student_id)
            .with_for_update()
            .first()
        )

    def lock_many(self, student_ids: List[int]) -> List[Student]:
        """Lock several students in ID order, which keeps lock order stable between callers."""
        if not student_ids:
            return []
        return (
            self.session.query(Student)
            .filter(Student.id.in_(student_ids))
            .order_by(Student.id)
            .with_for_update()
            .all()
        )

    def create_student(self, name: str) -> Student:
        student = Student(name=name, membership_status=MembershipStatus.ACTIVE.value)
        self.session.add(student)
        self.session.flush()
        return student

    def set_membership_status(self, student: Student, status: MembershipStatus) -> Student:
        student.membership_status = status.value
        self.session.flush()
        return student
