"""Logging and metrics for kflap."""
