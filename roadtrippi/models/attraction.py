"""
Attraction catalogue models: attractions and their categories
"""
from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from roadtrippi.core.db import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    icon = Column(String(64), nullable=True)


class AttractionCategory(Base):
    """Join row between attractions and categories"""
    __tablename__ = "attraction_categories"

    attraction_id = Column(Integer, ForeignKey("attractions.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)


class Attraction(Base):
    """
    A roadside point of interest.
    city/state may be missing (or state may be the "US" placeholder); the
    free-text address is then the fallback source for display values.
    Ungeocoded attractions have no latitude/longitude.
    """
    __tablename__ = "attractions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    city = Column(String(100), nullable=True, index=True)
    state = Column(String(2), nullable=True, index=True)
    address = Column(Text, nullable=True)
    latitude = Column(Float, nullable=True, index=True)
    longitude = Column(Float, nullable=True, index=True)
    image_url = Column(String(2000), nullable=True)
    source_url = Column(String(2000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    categories = relationship("Category", secondary="attraction_categories", lazy="selectin")
    check_ins = relationship("CheckIn", back_populates="attraction", cascade="all, delete-orphan")

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None
