"""Preset library and tooling for the orrery."""
