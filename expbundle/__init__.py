"""Modify components in Experience Cloud ExperienceBundle page JSON files."""

__version__ = "0.1.0"
