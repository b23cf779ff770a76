from sqlalchemy import (
    Boolean,
    Column,
    Integer,
    String,
    Text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Property(Base):
    __tablename__ = "properties"

    # Autoincrement id doubles as the store's natural (insertion) order
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, nullable=True, index=True)
    address = Column(Text, nullable=True)  # Street, city and state in one field
    owner = Column(String, nullable=True, index=True)
    area = Column(String, nullable=True)
    wifi = Column(Boolean, nullable=True)
    created_at = Column(String, nullable=True)  # ISO 8601 string


def create_all(engine: Engine) -> None:
    Base.metadata.create_all(engine)
