"""
Check-in (visit + optional rating/review) and review comments
"""
from sqlalchemy import Column, Integer, Float, Text, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from roadtrippi.core.db import Base


class CheckIn(Base):
    __tablename__ = "check_ins"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    attraction_id = Column(Integer, ForeignKey("attractions.id"), nullable=False, index=True)
    rating = Column(Float, nullable=True)  # 1.0 - 5.0 in 0.5 steps
    review = Column(Text, nullable=True)
    visit_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    # Relationships
    user = relationship("User", back_populates="check_ins")
    attraction = relationship("Attraction", back_populates="check_ins")
    comments = relationship("Comment", back_populates="check_in", cascade="all, delete-orphan")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    check_in_id = Column(Integer, ForeignKey("check_ins.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")
    check_in = relationship("CheckIn", back_populates="comments")
