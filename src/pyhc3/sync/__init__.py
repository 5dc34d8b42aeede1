"""Live-state synchronization: long-poll loop and event reconciliation."""
