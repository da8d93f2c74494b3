from sqlalchemy import Column, Integer, BigInteger, String, ForeignKey, DateTime
from sqlalchemy.sql import func
from splitledger.db.session import Base

class Settlement(Base):
    __tablename__ = "settlements"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    from_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    to_id = Column(Integer, ForeignKey("members.id"), nullable=False)
    amount = Column(BigInteger, nullable=False)
    # pending -> initiated -> completed / confirmed
    status = Column(String, nullable=False, server_default="pending")
    method = Column(String, nullable=False, server_default="upi")
    note = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)
