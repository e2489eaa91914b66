"""Stochastic projection engine for investment values."""

__version__ = "0.1.0"
