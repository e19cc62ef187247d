from sqlalchemy import Integer, String, Date, Time, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, func
from datetime import date, datetime, time
from sqlalchemy.orm import Mapped, mapped_column
from shiftdesk.db.database import Base


class Slots(Base):
    __tablename__ = "slots"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    center_id: Mapped[int] = mapped_column(Integer, ForeignKey("centers.id"), nullable=False)
    slot_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    booked_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # natural key, so concurrent generators cannot double-create a slot
    __table_args__ = (
        UniqueConstraint("center_id", "slot_date", "start_time", name="uq_slots_center_date_start"),
        CheckConstraint("start_time < end_time", name="ck_slots_window"),
    )
