from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, ForeignKey, Text
from sqlalchemy.orm import relationship

from .database import Base


# Owners and properties are written by the admin portal; the statement
# pipeline only reads them.

class Owner(Base):
    __tablename__ = "owners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True, index=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    properties = relationship("Property", back_populates="owner")


class Property(Base):
    __tablename__ = "properties"

    # portal-wide numeric property id (not autoincrement: assigned by the admin)
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=True)

    is_admin_owned = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True, index=True)

    # upstream (Hostkit) linkage
    hostkit_id = Column(String(64), nullable=True)
    hostkit_api_key = Column(Text, nullable=True)   # AES-GCM token, see crypto_secrets
    invoice_series = Column(JSON, nullable=True)    # e.g. ["HEAVEN2025"]

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("Owner", back_populates="properties")

    @property
    def owner_label(self) -> str:
        if self.is_admin_owned:
            return "Admin"
        if self.owner is not None and self.owner.name:
            return self.owner.name
        return "Unassigned"
