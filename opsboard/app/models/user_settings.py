"""
Per-user settings model.

At most one row per user; a missing row means "use defaults".
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from opsboard.app.db.session import Base


class UserSettings(Base):
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    # Overrides the built-in carrier token when set
    carrier_api_token = Column(Text, nullable=True)
    supabase_url = Column(Text, nullable=True)
    supabase_anon_key = Column(Text, nullable=True)
    notifications_enabled = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserSettings(user_id={self.user_id}, has_token={bool(self.carrier_api_token)})>"
