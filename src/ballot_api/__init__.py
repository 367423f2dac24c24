"""Ballot API: election administration, voting and tallying service."""

__version__ = "0.1.0"
