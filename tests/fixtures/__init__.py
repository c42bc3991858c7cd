"""Domain classes, descriptors and mapping documents used across the tests."""
