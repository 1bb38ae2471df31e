"""Tests for image_keeper.models."""
