from sqlalchemy import Column, String, Boolean, DateTime, Float, Index
from sqlalchemy.sql import func
from nestly.database.connection import Base


class User(Base):
    __tablename__ = "User"

    id = Column(String, primary_key=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # bcrypt hash; random for OAuth users
    name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    location = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    role = Column(String, nullable=False, default="USER", index=True)  # 'USER', 'OWNER', 'ADMIN'
    owner_verified = Column("ownerVerified", Boolean, nullable=False, default=False)
    credits = Column(Float, nullable=True, default=0)
    created_at = Column("createdAt", DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column("updatedAt", DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index('idx_user_role_created', 'role', 'createdAt'),
    )
