"""
Tests Package.

This package contains test suites for validating the pdaviz implementation,
including unit tests for the layout, edge geometry and trace stepper, and
integration tests for frame-driven sessions, the manim adapters and the CLI.
The tests ensure that layouts are reproducible, traces replay into the
expected parse trees and animation batches settle in order.
"""

# Tests Package
