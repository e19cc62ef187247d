from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint, func
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from shiftdesk.db.database import Base


class ShiftAssignments(Base):
    __tablename__ = "shift_assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    system_user_id: Mapped[int] = mapped_column(Integer, ForeignKey("members.id"), nullable=False, index=True)
    workshift_id: Mapped[int] = mapped_column(Integer, ForeignKey("workshifts.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    workshift = relationship("WorkShifts", back_populates="assignments")

    __table_args__ = (
        UniqueConstraint("system_user_id", "workshift_id", name="uq_shift_assignments_member_shift"),
    )
