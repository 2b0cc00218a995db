"""SQLAlchemy ORM models for payments handled by the gateway"""

from sqlalchemy import Column, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PaymentRecord(Base):
    """Payment as stored by the host"""

    __tablename__ = "payment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    config_id = Column(Integer, nullable=True, index=True)
    mode = Column(String(8), nullable=False, default="test")
    method = Column(Text, nullable=True)
    issuer = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    # Decimal as string to keep the exact value
    total_value = Column(Text, nullable=False)
    currency = Column(String(3), nullable=False)
    return_url = Column(Text, nullable=True)
    customer = Column(JSON, nullable=True)
    billing_address = Column(JSON, nullable=True)
    shipping_address = Column(JSON, nullable=True)
    lines = Column(JSON, nullable=True)
    status = Column(Text, nullable=False)
    transaction_id = Column(Text, nullable=True, index=True)
    action_url = Column(Text, nullable=True)
    meta = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
