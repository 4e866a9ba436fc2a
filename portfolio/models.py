"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
Column names are snake_case; the camelCase wire format lives in schemas.py.
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, JSON
from portfolio.database import Base


class User(Base):
    """Administrative account. A single row is expected in normal operation."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False, unique=True)
    password = Column(String, nullable=False)  # bcrypt hash


class Artwork(Base):
    """
    Catalog artwork.
    additional_images holds up to 3 supplementary image URLs, in display order.
    """
    __tablename__ = "artworks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    dimensions = Column(String, nullable=False, default="")
    technique = Column(String, nullable=False)
    year = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=True)
    additional_images = Column(JSON, nullable=False, default=list)
    is_visible = Column(Boolean, nullable=False, default=True)
    show_in_slider = Column(Boolean, nullable=False, default=True)
    order = Column("order", Integer, nullable=False, default=0, index=True)


class Exhibition(Base):
    """
    Exhibition with its own gallery.
    gallery_images is a list of {"url": ..., "caption": ...} objects.
    """
    __tablename__ = "exhibitions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    location = Column(String, nullable=False)
    year = Column(String, nullable=False)
    image_url = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    theme = Column(String, nullable=True)
    gallery_images = Column(JSON, nullable=False, default=list)
    video_url = Column(String, nullable=True)
    order = Column("order", Integer, nullable=False, default=0, index=True)


class ContactMessage(Base):
    __tablename__ = "contact_messages"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    message = Column(Text, nullable=False)


class SiteSetting(Base):
    """Generic key-value store; one JSON value per unique key."""
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String, nullable=False, unique=True)
    value = Column(JSON, nullable=False)
