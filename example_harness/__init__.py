"""Example harness.

Instantiates every example template of a catalog into a fresh directory and
runs the commands embedded in its rendered setup instructions, reporting
pass/fail per example.  A second mode adds generated components to each
language's composable app.
"""

__version__ = "0.1.0"
