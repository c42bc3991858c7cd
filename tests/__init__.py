"""
domainscope Test Suite
======================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/            → domainscope.core (config, models, spec, errors)
    ├── test_infrastructure/  → domainscope.infrastructure (sources, registry)
    ├── test_scope/           → domainscope.scope (scope, manager, producer, ...)
    ├── test_integration/     → the pytest plugin, run through pytester
    ├── fixtures/             → domain classes and YAML mappings used by tests
    └── conftest.py           → Shared pytest fixtures

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_scope/        # Run only scope tests
    pytest --cov=domainscope        # Run with coverage report
"""
