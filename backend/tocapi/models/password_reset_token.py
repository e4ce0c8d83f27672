"""Password reset token model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship
from tocapi.database import Base


class PasswordResetToken(Base):
    """Short-lived reset code issued to a user's email."""
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(String, nullable=False, index=True)
    token = Column(String(8), nullable=False)  # Uppercase hex code
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", backref="password_reset_tokens")
