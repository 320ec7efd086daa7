from sqlalchemy.orm import relationship
from sqlalchemy import Column, String, Integer, DateTime, func, Text

from roadtrippi.core.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    avatar_url = Column(String(2000), nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(200), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    check_ins = relationship("CheckIn", back_populates="user", cascade="all, delete-orphan")
    lists = relationship("AttractionList", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} username={self.username}>"
