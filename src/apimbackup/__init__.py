"""Trigger Azure API Management backups into blob storage."""

__version__ = "0.1.0"
