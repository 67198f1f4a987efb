"""Document model"""

from sqlalchemy import Column, String, DateTime, JSON
from datetime import datetime
from todo_app.core.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(String(32), primary_key=True, index=True)
    collection = Column(String, nullable=False, index=True)

    # Contenu libre du document (sans schéma)
    fields = Column(JSON, nullable=False, default=dict)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
