"""Tests for the household bills core."""
