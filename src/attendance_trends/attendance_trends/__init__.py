"""Attendance Trends package.

This package is organized by feature modules (snapshots, trends, leaderboard, ...)
with a thin Flask controller layer and service/repository layers over a
document store.
"""
