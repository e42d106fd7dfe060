"""Named notification brokers that pass events to listeners."""

__all__ = ["broker"]