"""
Career engine: the decision-resolution core of a career simulation.

Selects scenarios, resolves narrative branches, applies choice effects
and tracks achievements and storylines. Rendering, transport and
content authoring live elsewhere.
"""

__version__ = "0.1.0"
