"""Translation core services.

Plain functions over the models: the record store, change detection,
batching, reconciliation, translation memory and the string catalog.
"""
