"""
Parcel database model.

A parcel is an international shipment tracked through the carrier API.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from opsboard.app.db.session import Base


class Parcel(Base):
    """
    Parcel model.

    Core fields come from the owner's form; the derived fields stay empty
    until the first status refresh and are overwritten together on each one.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Core fields
    tracking_number = Column(String(255), nullable=False, index=True)
    destination = Column(Text, nullable=True)
    recipient_name = Column(Text, nullable=True)
    date_sent = Column(DateTime(timezone=True), nullable=True)
    note = Column(Text, nullable=True)

    # Derived fields
    current_status = Column(Text, nullable=True)
    current_status_description = Column(Text, nullable=True)
    current_location = Column(Text, nullable=True)
    last_updated = Column(DateTime(timezone=True), nullable=True)
    delivery_status = Column(Text, nullable=True)
    is_delivered = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Parcel(id={self.id}, tracking='{self.tracking_number}', user_id={self.user_id}, delivered={self.is_delivered})>"
