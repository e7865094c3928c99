"""
Chart of accounts model (Plan General Contable).

System accounts are shared by everyone; students may add their own
accounts on top of them.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func
from contaedu.app.db.session import Base
from contaedu.app.models.enums import AccountType


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    code = Column(String(20), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    account_type = Column(Enum(AccountType), nullable=False)
    parent_code = Column(String(20), nullable=True)

    # System accounts have no owner
    is_system = Column(Boolean, default=False, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Account(code='{self.code}', name='{self.name}', system={self.is_system})>"
