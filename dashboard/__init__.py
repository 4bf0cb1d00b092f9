"""
Review Dashboard - web view of code-review statistics.

Polls the reviews backend, keeps the latest snapshot in a DashboardView and
serves it as a server-rendered page plus a small JSON API.
"""
