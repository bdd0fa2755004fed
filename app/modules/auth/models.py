from sqlalchemy import Column, String, Uuid
from uuid import uuid4
from app.database.database import Base
from app.common.mixins import TimestampMixin


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    name = Column(String(200), nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    logo_url = Column(String(500), nullable=True)
