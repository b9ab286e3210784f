from __future__ import annotations
from datetime import datetime
from typing import Optional, Dict, Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, JSON
from helpdesk.constants.enums import TicketStatus
from helpdesk.models.user import Base, utcnow


class Ticket(Base):
    __tablename__ = 'tickets'
    # Status constants
    STATUS_OPEN = TicketStatus.OPEN.value
    STATUS_IN_PROGRESS = TicketStatus.IN_PROGRESS.value
    STATUS_ON_HOLD = TicketStatus.ON_HOLD.value
    STATUS_RESOLVED = TicketStatus.RESOLVED.value
    STATUS_CLOSED = TicketStatus.CLOSED.value
    ALL_STATUSES = (STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_ON_HOLD, STATUS_RESOLVED, STATUS_CLOSED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_OPEN, index=True)
    customer_id: Mapped[int] = mapped_column(ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    assigned_agent_id: Mapped[Optional[int]] = mapped_column(ForeignKey('users.id'), nullable=True, index=True)
    # Reason-for-outage record; accepted for any category
    rfo_details: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON(none_as_null=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    resolved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

# Status flow is open-ended: any status may be set through an update.
# Assignment advances open -> in_progress; resolved stamps resolved_at, which is never cleared.
