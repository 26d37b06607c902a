"""Sandlot - youth football play and game simulator."""

__version__ = "0.1.0"
