"""Tests for procmon_analytics package."""
