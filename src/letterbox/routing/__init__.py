"""Routing: the ordered, immutable-after-startup route table.

Routes are registered during setup, tried in registration order at
request time, and frozen into a tuple when the app freezes.
"""
