"""Shared infrastructure for planner_lite."""
