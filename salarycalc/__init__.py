"""Salary Calc - gross/net salary conversion under a progressive tax regime."""

__version__ = "0.1.0"
