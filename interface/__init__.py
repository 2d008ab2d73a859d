"""Front ends over the AtomChess engine: console game, UCI and REST."""
