"""Test suite for image_keeper."""
