"""SQLAlchemy models for the recipient directory."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import expression

from listing_alerts.infrastructure.database import Base
from listing_alerts.utils import now_in_app_naive_datetime


class RecipientModel(Base):
    """Database representation of someone who can receive listing alerts."""

    __tablename__ = "recipient"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=True)
    platform = Column(String(20), nullable=True)
    is_active = Column(
        Boolean, nullable=False, default=True, server_default=expression.true()
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)

    device_tokens = relationship(
        "DeviceTokenModel",
        back_populates="recipient",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="DeviceTokenModel.id",
    )


class DeviceTokenModel(Base):
    """Push token registered by one of the recipient's devices."""

    __tablename__ = "device_token"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(
        Integer,
        ForeignKey("recipient.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = Column(String(4096), nullable=False, unique=True)
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime(), nullable=True, onupdate=now_in_app_naive_datetime)

    recipient = relationship("RecipientModel", back_populates="device_tokens")


__all__ = ["DeviceTokenModel", "RecipientModel"]
