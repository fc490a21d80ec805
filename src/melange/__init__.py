"""melange — request router and settings resolver for a kiosk session overlay."""

__version__ = "0.1.0"
