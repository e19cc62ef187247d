from sqlalchemy import Integer, String, Date, Time, DateTime, ForeignKey, Enum as SQLEnum, Index, CheckConstraint, func
from datetime import date, datetime, time
from sqlalchemy.orm import Mapped, mapped_column, relationship
from enum import Enum
from shiftdesk.db.database import Base


class WorkShiftStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkShifts(Base):
    __tablename__ = "workshifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    shift_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    shift_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[WorkShiftStatus] = mapped_column(
        SQLEnum(WorkShiftStatus, name="workshift_status_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=WorkShiftStatus.ACTIVE,
    )
    center_id: Mapped[int] = mapped_column(Integer, ForeignKey("centers.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    assignments = relationship("ShiftAssignments", back_populates="workshift", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_workshifts_window"),
        Index("ix_workshifts_center_date", "center_id", "shift_date"),
    )
