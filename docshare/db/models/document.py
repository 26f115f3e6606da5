from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship

from docshare.db.base import Base, BaseModel, utcnow


class Document(BaseModel):
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    author_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False, index=True)
    visibility = Column(String(16), nullable=False, default="private", index=True)
    tags = Column(JSON, nullable=False, default=list)
    is_deleted = Column(Boolean, nullable=False, default=False)
    # Счетчик для условной записи, увеличивается каждой успешной мутацией
    version = Column(Integer, nullable=False, default=1)
    last_modified = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    # Relationships
    author = relationship("User", back_populates="authored_documents")
    grants = relationship(
        "DocumentGrant",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentGrant.id"
    )
    history = relationship(
        "DocumentHistory",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentHistory.id"
    )


class DocumentGrant(Base):
    __tablename__ = "document_grants"
    __table_args__ = (UniqueConstraint("document_id", "user_id", name="uq_document_grant_user"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Uuid(as_uuid=True), ForeignKey("documents.uuid"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False, index=True)
    permission = Column(String(8), nullable=False)

    # Relationships
    document = relationship("Document", back_populates="grants")


class DocumentHistory(Base):
    __tablename__ = "document_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Uuid(as_uuid=True), ForeignKey("documents.uuid"), nullable=False, index=True)
    actor_id = Column(Uuid(as_uuid=True), ForeignKey("users.uuid"), nullable=False)
    action = Column(String(16), nullable=False)
    changes = Column(JSON, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    document = relationship("Document", back_populates="history")
