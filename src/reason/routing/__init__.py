"""Routing — compiled route table with O(path-depth) matching.

Routes are registered while resources are added and compiled into an
immutable lookup structure when the app freezes.
"""
