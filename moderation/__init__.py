"""Spam screening service for job board submissions."""

__version__ = "0.1.0"
