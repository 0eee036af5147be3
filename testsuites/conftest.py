"""
================================================================================
Test Suite Pytest Configuration
================================================================================

Registers the suite markers and tags collected tests by the runtime layer
they exercise.

================================================================================
"""

import pytest


# Test file prefix -> layer marker
_LAYER_MARKERS = {
    "test_lookup": "common",
    "test_table_formatter": "common",
    "test_wait_helpers": "common",
    "test_config_loader": "common",
    "test_token_manager": "common",
    "test_page_builder": "pages",
    "test_property_handle": "pages",
    "test_page_mapper": "pages",
    "test_comparers": "validation",
    "test_validation": "validation",
    "test_element_locator": "pipeline",
    "test_action_pipeline": "pipeline",
    "test_actions": "actions",
    "test_navigation": "actions",
    "test_playwright_driver": "drivers",
    "test_runtime": "runtime",
}


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Test type markers
    config.addinivalue_line(
        "markers", "unit: Fast tests running against the in-memory driver"
    )

    # Layer markers
    config.addinivalue_line(
        "markers", "common: Configuration, lookup keys, waits, tokens and tables"
    )
    config.addinivalue_line(
        "markers", "pages: Page declarations, builder, handles and mapper"
    )
    config.addinivalue_line(
        "markers", "validation: Comparers, validation tables and the validation engine"
    )
    config.addinivalue_line(
        "markers", "pipeline: Element locator, repository and action pipeline"
    )
    config.addinivalue_line(
        "markers", "actions: Verbs and hooks"
    )
    config.addinivalue_line(
        "markers", "drivers: Native driver adapters"
    )
    config.addinivalue_line(
        "markers", "runtime: Runtime composition"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Tests under unit/ are marked 'unit' and with the marker of their layer.
    """
    for item in items:
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)

        layer = _LAYER_MARKERS.get(item.path.stem)
        if layer:
            item.add_marker(getattr(pytest.mark, layer))


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "PageBind Page Object Runtime",
        "=" * 60,
        "",
    ]
