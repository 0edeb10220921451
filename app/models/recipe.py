from .base import Base

from sqlalchemy import Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), unique=True, nullable=False)
    author = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    prep_time = Column(Integer)
    cooking_time = Column(Integer)
    servings = Column(Integer)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    ingredients = relationship(
        "Ingredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
