"""
Prepares isolated, disposable input bundles for a document-build pipeline.
"""

__version__ = "1.0.0"
