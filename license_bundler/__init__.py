"""license-bundler: third-party license attribution bundles for Python projects."""

__version__ = "0.1.0"
