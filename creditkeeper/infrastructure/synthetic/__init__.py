"""Synthetic demo data."""

from .generator import ARCHETYPES, Archetype, SyntheticProfileGenerator, generate_profile

__all__ = [
    "ARCHETYPES",
    "Archetype",
    "SyntheticProfileGenerator",
    "generate_profile",
]
