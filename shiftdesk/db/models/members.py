from sqlalchemy import Integer, String, DateTime, func, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from enum import Enum
from shiftdesk.db.database import Base

class MemberRole(str, Enum):
    STAFF = "STAFF"
    TECHNICIAN = "TECHNICIAN"

class Members(Base):
    """System users who can be put on a work shift."""
    __tablename__ = "members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[MemberRole] = mapped_column(SQLEnum(MemberRole, name="member_role_enum"), nullable=False)
    center_id: Mapped[int] = mapped_column(Integer, ForeignKey("centers.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_members_center_role", "center_id", "role"),
    )
