"""Hollow-core strand cross-section geometry and slippage analysis."""
