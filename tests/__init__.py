"""
yogini test suite
=================

This package contains the tests for yogini.

Test Modules
------------
- test_keywords.py: Keyword list formatting
- test_directives.py: Filename directive parsing
- test_rendering.py: Jinja2 environment and substitution
- test_transforms.py: Per-type content transforms
- test_viewdata.py: View data assembly
- test_models.py: Pydantic configuration models
- test_config.py: yogini.json loading and mode detection
- test_prompts.py: Answer collection and the reserved-name check
- test_writer.py: File-write backend
- test_generator.py: The Materializer, end to end
- test_cli.py: Command-line interface

Running Tests
-------------
    # Run all tests
    pytest

    # Run specific module
    pytest tests/test_directives.py

    # Run specific test class
    pytest tests/test_generator.py::TestCreateRun
"""
