"""Tests for image_keeper.engine."""
