"""SQLAlchemy ORM models."""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from djibgo.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255))
    email_confirmed_at = Column(DateTime(timezone=True))
    phone_confirmed_at = Column(DateTime(timezone=True))
    banned_until = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True))
    last_sign_in_at = Column(DateTime(timezone=True))


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(255))
    phone = Column(String(32))
    temporary_credential_expires_at = Column(DateTime(timezone=True))
    temporary_credential_issued_at = Column(DateTime(timezone=True))
    temporary_credential_reminded_at = Column(DateTime(timezone=True))
    issuance_lease_until = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class AuthSession(Base):
    __tablename__ = "auth_sessions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    account_id = Column(
        String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class DeliveryRecord(Base):
    __tablename__ = "delivery_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    phone_number = Column(String(32), nullable=False)
    message = Column(Text, nullable=False)
    channel = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
