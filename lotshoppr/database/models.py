from datetime import datetime
from sqlalchemy import String, Float, Integer, DateTime, Text, JSON, ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class Lead(Base):
    """One shopping request: who is buying, what, and for how much."""
    __tablename__ = "leads"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    status: Mapped[str] = mapped_column(String(20), default="new", index=True)  # new, negotiating, won, lost
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # Shopper
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(100))
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    zip_code: Mapped[str | None] = mapped_column(String(10))

    # Vehicle
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    trim: Mapped[str | None] = mapped_column(String(100))
    drivetrain: Mapped[str | None] = mapped_column(String(20))
    color: Mapped[str | None] = mapped_column(String(50))
    interior: Mapped[str] = mapped_column(String(10), default="any")  # light, dark, any

    # Constraints
    must_haves: Mapped[list] = mapped_column(JSON, default=list)
    dealbreakers: Mapped[list] = mapped_column(JSON, default=list)
    target_price: Mapped[float | None] = mapped_column(Float)
    max_price: Mapped[float | None] = mapped_column(Float)
    tolerance_above_target: Mapped[float] = mapped_column(Float, default=0)
    timeline_description: Mapped[str | None] = mapped_column(String(200))
    deal_type: Mapped[str] = mapped_column(String(10), default="cash")  # cash, lease, finance
    lease_terms: Mapped[dict | None] = mapped_column(JSON)
    finance_terms: Mapped[dict | None] = mapped_column(JSON)

    conversation: Mapped[list["ConversationEntry"]] = relationship(
        back_populates="lead",
        order_by="ConversationEntry.id",
        cascade="all, delete-orphan",
    )


class ConversationEntry(Base):
    """A message sent to or received from a dealer on behalf of a lead."""
    __tablename__ = "conversation_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[str] = mapped_column(String(32), ForeignKey("leads.id"), nullable=False)
    sender: Mapped[str] = mapped_column(String(20))  # dealer, customer, system
    dealer_id: Mapped[str | None] = mapped_column(String(100))
    subject: Mapped[str | None] = mapped_column(String(500))
    text: Mapped[str] = mapped_column(Text, nullable=False)
    decision: Mapped[str | None] = mapped_column(String(20))
    at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    lead: Mapped[Lead] = relationship(back_populates="conversation")

    __table_args__ = (
        Index("ix_conversation_lead_dealer", "lead_id", "dealer_id"),
    )
