"""
User-curated attraction lists
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from roadtrippi.core.db import Base


class AttractionList(Base):
    __tablename__ = "lists"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    public = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User", back_populates="lists")
    items = relationship(
        "ListItem",
        back_populates="list",
        order_by="ListItem.position",
        cascade="all, delete-orphan",
    )
    comments = relationship("ListComment", back_populates="list", cascade="all, delete-orphan")


class ListItem(Base):
    __tablename__ = "list_items"
    __table_args__ = (UniqueConstraint("list_id", "attraction_id", name="uq_list_items_list_attraction"),)

    id = Column(Integer, primary_key=True)
    list_id = Column(Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True)
    attraction_id = Column(Integer, ForeignKey("attractions.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    notes = Column(Text, nullable=True)

    list = relationship("AttractionList", back_populates="items")
    attraction = relationship("Attraction")


class ListComment(Base):
    __tablename__ = "list_comments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    list_id = Column(Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")
    list = relationship("AttractionList", back_populates="comments")
