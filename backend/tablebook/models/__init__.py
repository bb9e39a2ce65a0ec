from .tables import Base, KeyValue, Reservations, metadata

__all__ = ["Base", "KeyValue", "Reservations", "metadata"]
