"""Announcement dispatch core.

Resolves a targeting descriptor into a delivery plan, writes one
notification per reached recipient, and records an append-only audit
row for every dispatch.
"""
