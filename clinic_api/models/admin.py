from sqlalchemy import Column, Integer, String

from ..core.database import Base

class Admin(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<Admin(id={self.id}, username='{self.username}')>"
