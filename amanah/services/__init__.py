"""Domain services: Faraid calculation and agreement lifecycle rules."""
