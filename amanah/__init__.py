"""Faraid distribution and agreement lifecycle engine."""
