"""Core dialog components."""
