"""Test suite for portal-catalog."""
