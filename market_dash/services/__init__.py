"""
Service layer: storage, record sources, record stores, export and the
table service that drives pipelines on behalf of the UI.
"""
