"""CLI interface for the expbundle ExperienceBundle editing tool.

This package provides command-line access to component property updates,
with values taken from literals, SOQL queries, or org variables.
"""
