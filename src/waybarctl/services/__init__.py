"""Service layer — the coordinating store, history, and ServiceResult contract.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
