"""Task lifecycle and timeline/board drag-and-drop synchronization engine."""
