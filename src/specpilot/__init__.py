"""SpecPilot: CDP tracking-plan specs and destination adapters."""

__version__ = "1.0.0"
