"""Administrator database model."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base


class Administrator(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Administrator id={self.id} username={self.username!r}>"
