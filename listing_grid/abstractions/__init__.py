"""Shared abstractions for the grid generation pipeline."""
