"""SQLAlchemy model for product records."""

from sqlalchemy import Column, Integer, Numeric, String, Text

from app.db.base import Base


class Product(Base):
    __tablename__ = "Product"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r}>"
