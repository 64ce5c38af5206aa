"""Tag model + table d'association page <-> tag"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from notely.core.database import Base


class Tag(Base):
    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("name", "user_id", name="uq_tags_name_user"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)  # toujours en minuscules
    created_at = Column(DateTime, default=datetime.utcnow)

    page_tags = relationship("PageTag", back_populates="tag", cascade="all, delete-orphan")


class PageTag(Base):
    __tablename__ = "page_tags"

    page_id = Column(Integer, ForeignKey("pages.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    page = relationship("Page", back_populates="page_tags")
    tag = relationship("Tag", back_populates="page_tags")
