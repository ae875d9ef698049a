"""Bitwarden Send creation for new accounts."""
