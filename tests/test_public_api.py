"""Public API surface tests."""

import re

import shipdesk


def test_all_exports_exact_set() -> None:
    expected = {
        "Database",
        "ShipdeskConfig",
        "ShipdeskError",
        "ShipmentLedger",
        "ShipmentQueries",
        "__version__",
        "create_app",
        "register_exception_handlers",
    }
    assert set(shipdesk.__all__) == expected


def test_all_exports_importable() -> None:
    for name in shipdesk.__all__:
        obj = getattr(shipdesk, name)
        assert obj is not None, f"{name} resolved to None"


def test_version_semver_format() -> None:
    version = shipdesk.__version__
    assert isinstance(version, str)
    assert re.match(r"^\d+\.\d+\.\d+", version), (
        f"Version {version!r} does not match semver format"
    )
