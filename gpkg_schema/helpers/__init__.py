"""Store, script resource and output helpers."""
