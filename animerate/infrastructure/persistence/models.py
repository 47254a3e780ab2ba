"""SQLAlchemy models for users and ratings."""
from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    Integer,
    String,
    Text,
)

from animerate.constants import MAX_VARCHAR_LENGTH_LONG, MAX_VARCHAR_LENGTH_SHORT
from animerate.infrastructure.persistence.db import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(MAX_VARCHAR_LENGTH_SHORT), unique=True, nullable=False)
    password = Column(String(MAX_VARCHAR_LENGTH_SHORT), nullable=False)


class Rating(Base):
    __tablename__ = "ratings"

    user_id = Column(Integer, primary_key=True, index=True)
    id = Column(String(MAX_VARCHAR_LENGTH_SHORT), primary_key=True)
    anime_id = Column(Integer, nullable=False)
    anime_title = Column(String(MAX_VARCHAR_LENGTH_LONG), nullable=False)
    anime_image = Column(String(MAX_VARCHAR_LENGTH_LONG), nullable=False)
    categories = Column(JSON, nullable=False)
    overall_rating = Column(Float, nullable=False)
    notes = Column(Text)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
