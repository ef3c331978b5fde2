"""Top-level package for the CO Attainment Toolkit.

Provides subpackages:
- attainment_toolkit.core – validated models, payload adapters, validation
- attainment_toolkit.common – shared attainment thresholds
- attainment_toolkit.scoring – totals, CO attainment, indirect merge, course level
- attainment_toolkit.controller – one-call report orchestration
"""


def _get_version() -> str:
    """Get version from importlib.metadata (installed) or fall back for a source tree."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("attainment-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
