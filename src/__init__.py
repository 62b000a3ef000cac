"""Calendar view-model engine"""

__version__ = "0.1.0"
