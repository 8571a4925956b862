"""Servers exposing the calendar tools."""
