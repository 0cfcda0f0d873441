"""Prediction lifecycle and accuracy tracking for trading bots."""

__version__ = "0.1.0"
