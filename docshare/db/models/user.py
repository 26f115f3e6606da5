from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from docshare.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(100), index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Первое слово имени после casefold; по нему ищутся упоминания
    name_key = Column(String(100), index=True, nullable=False, default="")

    # Relationships
    authored_documents = relationship("Document", back_populates="author")
