"""Student database model."""

from sqlalchemy import Column, DateTime, Enum, Integer, String

from app.models.base import Base, Level, utcnow


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    level = Column(Enum(Level, name="student_level"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self) -> str:
        return f"<Student id={self.id} username={self.username!r} level={self.level}>"
