"""Testing helpers for PyMemSpec harnesses."""
