"""caption-harvest: YouTube subtitle acquisition and cleaning."""

__version__ = "0.1.0"
