"""AtomChess: a small 0x88 chess engine with a material-only negamax search."""

__version__ = "1.0.0"
