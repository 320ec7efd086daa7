"""
Likes on reviews (check-ins) and lists.

target_id is resolved against check_ins or lists depending on target_type,
so there is no foreign key on it.
"""
from dataclasses import dataclass
import enum

from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum, func
from sqlalchemy.orm import relationship

from roadtrippi.core.db import Base


class LikeTargetType(str, enum.Enum):
    """What a like points at"""
    REVIEW = "review"
    LIST = "list"


@dataclass(frozen=True)
class LikeTarget:
    type: LikeTargetType
    id: int


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "target_id", "target_type", name="uq_likes_user_target"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    target_id = Column(Integer, nullable=False, index=True)
    target_type = Column(
        SQLEnum(LikeTargetType, values_callable=lambda e: [m.value for m in e], name="like_target_type"),
        nullable=False,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")

    @property
    def target(self) -> LikeTarget:
        return LikeTarget(type=LikeTargetType(self.target_type), id=self.target_id)
