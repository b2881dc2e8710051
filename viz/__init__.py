"""
Visualization Package.

This package provides export helpers that hand laid-out automaton graphs to
external viewers, such as Cytoscape-style element lists for web front ends.
The helpers are plain functions over `pda_core.graph.Graph`, so they can be
tested without any viewer installed.
"""

# Visualization Package
