from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Integer, String, Text

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "(has_due_date AND due_date IS NOT NULL) OR (NOT has_due_date AND due_date IS NULL)",
            name="ck_tasks_due_date_consistent",
        ),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    notes = Column(Text, nullable=True)
    created_on = Column(DateTime, nullable=False, index=True)
    has_due_date = Column(Boolean, nullable=False, default=False)
    due_date = Column(Date, nullable=True, index=True)
    is_complete = Column(Boolean, nullable=False, default=False)
