"""
SQLAlchemy ORM models for persistence.
"""
from sqlalchemy import Column, String, Text

from db import Base


class ComputerORM(Base):
    __tablename__ = "computers"

    MAC = Column(String(17), primary_key=True, nullable=False)
    Name = Column(String(50), primary_key=True, nullable=False)
    IP = Column(String(15), primary_key=True, nullable=False)
    # NULL reads back as "" in the domain model
    Assignee = Column(String(3), nullable=True)
    Description = Column(Text, nullable=True)
