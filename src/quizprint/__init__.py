"""Top-level package for the quiz print layout engine.

Provides subpackages:
- quizprint.core – immutable section / item models and serialization
- quizprint.builder – normalizer, layout engine, loader, PDF output
"""

def _get_version() -> str:
    """Get version from importlib.metadata (installed) or pyproject.toml (source checkout)."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        return pkg_version("quizprint")
    except PackageNotFoundError:
        pass

    # Not installed: read the [project] table of the checkout
    import tomllib
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    try:
        with open(pyproject, "rb") as f:
            return str(tomllib.load(f)["project"]["version"])
    except (OSError, tomllib.TOMLDecodeError, KeyError):
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
