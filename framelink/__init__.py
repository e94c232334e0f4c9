"""File transfer client and server over a sliding-window data link layer with simulated frame loss."""

__version__ = "0.1.0"