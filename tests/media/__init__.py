"""Tests for image_keeper.media."""
