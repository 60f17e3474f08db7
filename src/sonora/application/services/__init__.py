"""Application services.

Import from the submodules directly - the enrichment worker depends on
metadata_merge while library_service depends on the worker, so this package
stays import-free.
"""
