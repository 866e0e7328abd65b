"""Listing alerts service package.

Fans out marketplace listing alerts to recipients' devices and keeps a
per-recipient notification feed.
"""
