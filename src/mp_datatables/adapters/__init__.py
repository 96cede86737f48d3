"""Adapters – concrete document stores."""
