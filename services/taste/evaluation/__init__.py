"""Offline diagnostics over exported taste profiles."""
