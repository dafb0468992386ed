"""Async chat providers behind one generate() contract."""
