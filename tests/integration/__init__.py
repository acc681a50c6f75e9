"""Integration tests for components working together as a system.

Coverage:
    - Download, redirect, attachment, and profile endpoints through FastAPI
    - Full chat turns from prompt to attached documents

Runs against the real app over ASGITransport with S3 stubbed, so the tests
are fast and need no environment variables.
"""
