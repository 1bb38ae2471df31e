"""Tests for image_keeper.parsers."""
