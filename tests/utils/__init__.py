"""Tests for image_keeper.utils."""
