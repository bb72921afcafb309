"""Infrastructure layer — file I/O gateway and persisted session state.

Infrastructure may import from domain but never from services or commands.
"""
