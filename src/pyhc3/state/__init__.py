"""State layer.

Holds the local device snapshot and the derived connection state.
Nothing in this package performs I/O; the sync engine is the only
writer once a client is connected.
"""
