"""domainscope.testing - Fixtures and standard domain classes for tests."""
