"""User model for account holders."""
from sqlalchemy import Column, String, DateTime, Uuid, func
import uuid
from tocapi.database import Base


class User(Base):
    """Account holder model."""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)  # Stored lowercase
    password_hash = Column(String, nullable=False)
    name = Column(String)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
