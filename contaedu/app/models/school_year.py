"""
School year and system configuration models.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func
from contaedu.app.db.session import Base
from contaedu.app.models.enums import TaxRegime


class SchoolYear(Base):
    """
    Academic year that groups courses.

    At most one school year is active at a time.
    """
    __tablename__ = "school_years"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    active = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<SchoolYear(id={self.id}, name='{self.name}', active={self.active})>"


class SystemConfig(Base):
    """Singleton row with system-wide settings editable by the admin."""
    __tablename__ = "system_config"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tax_regime = Column(Enum(TaxRegime), default=TaxRegime.IVA, nullable=False)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<SystemConfig(tax_regime='{self.tax_regime.value}')>"
