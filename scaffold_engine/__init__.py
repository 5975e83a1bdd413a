"""Scaffold Engine -- constraint-driven project generation.

Validates an archetype's constraints, picks a template, optionally asks a
local LLM for additions, writes the files, runs the setup commands, and
checks the result against the template's validation rules.
"""

__version__ = "1.0.0"
