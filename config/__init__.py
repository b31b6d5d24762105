"""Configuration modules for the orrery simulation."""
