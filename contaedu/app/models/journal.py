"""
Journal database models.

A journal entry (asiento) exclusively owns its lines; deleting the entry
deletes the lines. Entries are never edited in place.
"""

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Numeric, ForeignKey,
    Index, UniqueConstraint, PrimaryKeyConstraint, text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from contaedu.app.db.session import Base


class JournalEntry(Base):
    """
    Journal entry header.

    entry_number is sequential per (owner, exercise scope) and is
    allocated through JournalSequence.
    """
    __tablename__ = "journal_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "exercise_id", "entry_number", name="uq_journal_entry_number"),
        # NULL exercise_id never conflicts above; the general scope needs its own index
        Index(
            "uq_journal_entry_number_general",
            "user_id",
            "entry_number",
            unique=True,
            postgresql_where=text("exercise_id IS NULL"),
            sqlite_where=text("exercise_id IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    entry_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    lines = relationship(
        "JournalLine",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="JournalLine.position",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<JournalEntry(id={self.id}, number={self.entry_number}, user_id={self.user_id})>"


class JournalLine(Base):
    """Single account posting inside an entry."""
    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    journal_entry_id = Column(
        Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False, default=0)

    # Denormalised: not a foreign key to accounts
    account_code = Column(String(20), nullable=False, index=True)
    account_name = Column(String(255), nullable=False)

    debit = Column(Numeric(12, 2), nullable=False, default=0)
    credit = Column(Numeric(12, 2), nullable=False, default=0)

    def __repr__(self):
        return f"<JournalLine(account='{self.account_code}', debit={self.debit}, credit={self.credit})>"


class JournalSequence(Base):
    """Last entry number handed out per owner and exercise scope."""
    __tablename__ = "journal_sequences"
    __table_args__ = (
        PrimaryKeyConstraint("owner_id", "scope", name="pk_journal_sequence"),
    )

    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    scope = Column(String(40), nullable=False)
    last_number = Column(Integer, nullable=False, default=0)
