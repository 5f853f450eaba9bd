# server/models/user.py

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship
from . import Base, new_id, utcnow


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Registered account. Only the bcrypt hash of the password is stored;
    the email column carries the uniqueness constraint.
    """
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(50), nullable=False)
    email = Column(String(254), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    avatar = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tasks = relationship("Task", back_populates="owner", passive_deletes=True)
