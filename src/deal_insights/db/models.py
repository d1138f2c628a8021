"""ORM model for the deals table."""

from sqlalchemy import Column, DateTime, Float, Integer, String, func
from sqlalchemy.orm import DeclarativeBase

from deal_insights.discovery.deal_record import Deal


class Base(DeclarativeBase):
    pass


class DealRow(Base):
    """One sales opportunity as stored."""

    __tablename__ = "deals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    deal_id = Column(String(64), nullable=True, unique=True)
    company_name = Column(String(255), nullable=True)
    contact_name = Column(String(255), nullable=True)
    transportation_mode = Column(String(64), nullable=False, default="")
    stage = Column(String(32), nullable=False, index=True)  # prospect .. closed_lost
    value = Column(Float, nullable=False, default=0.0)
    probability = Column(Integer, nullable=False, default=0)  # 0-100
    sales_rep = Column(String(255), nullable=False, default="")
    origin_city = Column(String(255), nullable=False, default="")  # "City, ST"
    destination_city = Column(String(255), nullable=True)
    cargo_type = Column(String(128), nullable=True)
    expected_close_date = Column(DateTime(timezone=True), nullable=True)
    created_date = Column(DateTime(timezone=True), server_default=func.now())
    updated_date = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_record(self) -> Deal:
        """Detach the row into an immutable Deal for the analytics layer."""
        return Deal.from_row({
            "id": self.id,
            "deal_id": self.deal_id,
            "company_name": self.company_name,
            "contact_name": self.contact_name,
            "transportation_mode": self.transportation_mode,
            "stage": self.stage,
            "value": self.value,
            "probability": self.probability,
            "sales_rep": self.sales_rep,
            "origin_city": self.origin_city,
            "destination_city": self.destination_city,
            "cargo_type": self.cargo_type,
            "expected_close_date": self.expected_close_date,
            "created_date": self.created_date,
            "updated_date": self.updated_date,
        })
