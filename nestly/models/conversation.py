from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from nestly.database.connection import Base


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("User.id", ondelete="CASCADE"), nullable=False, index=True)
    admin_id = Column(String, ForeignKey("User.id", ondelete="SET NULL"), nullable=True, index=True)  # None until assigned
    subject = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="open", index=True)  # 'open', 'closed', 'pending'
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    last_message_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    user = relationship("User", foreign_keys=[user_id])
    admin = relationship("User", foreign_keys=[admin_id])

    __table_args__ = (
        Index('idx_conversations_status_last', 'status', 'last_message_at'),
    )
