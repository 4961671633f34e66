"""
Core utilities shared by the manifest, sync and UI layers.
"""
