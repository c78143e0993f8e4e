"""Shared helpers: errors, logging, money, dates, masking and validation."""
