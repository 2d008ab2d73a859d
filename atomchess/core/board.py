"""0x88 board: a 128-cell grid whose off-board half holds a frontier sentinel."""

from typing import Iterator, List, Optional, Tuple

BOARD_SIZE = 128

# Cell encoding: bits 0-2 piece type, bit 3 color, bit 4 "unmoved".
TYPE_MASK = 0x07
COLOR_MASK = 0x08
UNMOVED = 0x10
PIECE_MASK = 0x0F

EMPTY = 0
PAWN = 1
ROOK = 2
BISHOP = 3
QUEEN = 4
KNIGHT = 5
KING = 6
FRONTIER = 7

BLACK = 0x00
WHITE = 0x08

PIECE_NAMES = {
    PAWN: "PAWN",
    ROOK: "ROOK",
    BISHOP: "BISHOP",
    QUEEN: "QUEEN",
    KNIGHT: "KNIGHT",
    KING: "KING",
}

# Back rank from the a-file to the h-file.
BACK_RANK = (ROOK, KNIGHT, BISHOP, QUEEN, KING, BISHOP, KNIGHT, ROOK)

# Row 0 is rank 8 (black's home row), row 7 is rank 1 (white's home row).
HOME_ROW = {WHITE: 7, BLACK: 0}
PAWN_ROW = {WHITE: 6, BLACK: 1}
LAST_ROW = {WHITE: 0, BLACK: 7}


def is_valid_square(index: int) -> bool:
    return 0 <= index < BOARD_SIZE and (index & 0x88) == 0


def piece_type(cell: int) -> int:
    return cell & TYPE_MASK


def piece_color(cell: int) -> int:
    return cell & COLOR_MASK


def make_piece(ptype: int, color: int, unmoved: bool = False) -> int:
    return ptype | color | (UNMOVED if unmoved else 0)


def opponent(color: int) -> int:
    return color ^ COLOR_MASK


def valid_squares() -> Iterator[int]:
    """Yield the 64 playable indices in ascending order."""
    for index in range(BOARD_SIZE):
        if index & 0x88 == 0:
            yield index


class Board:
    """
    Storage and addressing for the 0x88 grid.

    ``get`` and ``set`` are the only bounds defense: any index failing the
    validity test reads as FRONTIER and ignores writes. The move generator and
    mutator index ``cells`` directly after validating indices themselves.
    """

    def __init__(self):
        """Create an empty board: frontier off the grid, empty on it."""
        self.cells = bytearray(BOARD_SIZE)
        self.ep_square: Optional[int] = None
        self.clear()

    def clear(self):
        for index in range(BOARD_SIZE):
            self.cells[index] = EMPTY if index & 0x88 == 0 else FRONTIER
        self.ep_square = None

    def setup(self):
        """Place the standard starting position."""
        self.clear()
        for col, ptype in enumerate(BACK_RANK):
            self.cells[HOME_ROW[BLACK] * 16 + col] = make_piece(ptype, BLACK, unmoved=True)
            self.cells[HOME_ROW[WHITE] * 16 + col] = make_piece(ptype, WHITE, unmoved=True)
            self.cells[PAWN_ROW[BLACK] * 16 + col] = make_piece(PAWN, BLACK)
            self.cells[PAWN_ROW[WHITE] * 16 + col] = make_piece(PAWN, WHITE)
        self.ep_square = None

    def get(self, index: int) -> int:
        if not is_valid_square(index):
            return FRONTIER
        return self.cells[index]

    def set(self, index: int, value: int):
        if is_valid_square(index):
            self.cells[index] = value

    def __getitem__(self, index: int) -> int:
        return self.get(index)

    def __setitem__(self, index: int, value: int):
        self.set(index, value)

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other.cells = bytearray(self.cells)
        other.ep_square = self.ep_square
        return other

    def snapshot(self) -> Tuple[bytes, Optional[int]]:
        """Return an immutable image of the cells and the en-passant target."""
        return bytes(self.cells), self.ep_square

    def pieces(self, color: int) -> List[Tuple[int, int]]:
        """Return (index, cell) for every piece of ``color``."""
        found = []
        for index in valid_squares():
            cell = self.cells[index]
            if piece_type(cell) != EMPTY and piece_color(cell) == color:
                found.append((index, cell))
        return found

    def king_square(self, color: int) -> Optional[int]:
        for index, cell in self.pieces(color):
            if piece_type(cell) == KING:
                return index
        return None

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def __repr__(self):
        return f"Board(pieces={len(self.pieces(WHITE)) + len(self.pieces(BLACK))}, ep={self.ep_square})"
