"""Version metadata for the SCP teammate HUD plugin."""

__version__ = "5.0.0"
