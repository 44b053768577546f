from sqlalchemy import Column, Integer, String

from app.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    login = Column(String, nullable=False, unique=True, index=True)
    password_hash = Column(String, nullable=False)
