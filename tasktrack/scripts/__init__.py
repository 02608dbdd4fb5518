"""Operational command-line scripts."""
