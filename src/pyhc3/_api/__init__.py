"""Endpoint modules for the hub REST API.

Each module wraps one resource family on top of a
:class:`pyhc3._transport.Transport`.  They are internal; use
:class:`pyhc3.client.Hc3Client`.
"""
