from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship, validates

from menu_import.core.errors import ValidationError
from menu_import.core.names import normalize_name
from menu_import.db.base import Base


class Restaurant(Base):
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    name_key = Column(String(255), nullable=False, unique=True, index=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    menus = relationship("Menu", back_populates="restaurant", cascade="all, delete-orphan")

    @validates("name")
    def validate_name(self, key, value):
        if value is None or not str(value).strip():
            raise ValidationError("Restaurant", {"name": "can't be blank"})
        self.name_key = normalize_name(value)
        return value

    def __repr__(self) -> str:
        return f"<Restaurant id={self.id} name={self.name!r}>"
