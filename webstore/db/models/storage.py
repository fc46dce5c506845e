from sqlalchemy import Column, String, LargeBinary, DateTime, ForeignKey
from sqlalchemy.sql import func

from webstore.core.db import Base


class ObjectModel(Base):
    """Объект, адресуемый по содержимому: blob или commit"""
    __tablename__ = "objects"

    hash = Column(String(40), primary_key=True)
    kind = Column(String(16), nullable=False)
    payload = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class HeadModel(Base):
    """Текущая версия документа"""
    __tablename__ = "heads"

    name = Column(String(255), primary_key=True)
    commit = Column(String(40), ForeignKey("objects.hash"), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
