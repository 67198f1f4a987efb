from sqlalchemy import Column, String, DateTime
from datetime import datetime
import uuid
from todo_app.core.database import Base
import bcrypt

def new_uid() -> str:
    return uuid.uuid4().hex

class User(Base):
    __tablename__ = "users"

    # uid opaque, jamais réutilisé
    id = Column(String(32), primary_key=True, default=new_uid)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def set_password(self, password: str):
        self.password_hash = bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()

    def verify_password(self, password: str) -> bool:
        return bcrypt.checkpw(password.encode(), self.password_hash.encode())
