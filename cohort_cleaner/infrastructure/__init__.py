"""Infrastructure adapters: console logging and file collaborators."""
