"""Slack delivery of Bitwarden Send links to new users."""
