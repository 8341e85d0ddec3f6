"""Paddy settlement calculator."""
