from sqlalchemy import Column, Index, Integer, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        Index('ix_reservations_date_time', 'date', 'time'),
    )

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    date = Column(Text, nullable=False)
    time = Column(Text, nullable=False)
    end_time = Column(Text)
    guests = Column(Integer, nullable=False)
    status = Column(Text, nullable=False)
    notes = Column(Text)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)


class KeyValue(Base):
    __tablename__ = 'kv'

    key = Column(Text, primary_key=True)
    json = Column(Text, nullable=False)
