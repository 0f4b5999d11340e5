"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

# Chess board is always 8x8: (rows, columns)
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    """
    Internal coordinates: (row, col), both counting from 0.

    Row 0 is black's back rank (rank 8 in algebraic notation), row 7 is white's back rank (rank 1).
    Column 0 is the a-file, column 7 the h-file.
    """

    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)

        NOTE: no validation happens here. Bogus characters simply end up as out-of-bounds coordinates.
        """
        col = ord(sq[0].lower()) - ord("a")
        row = BOARD_DIMENSIONS[0] - (ord(sq[1]) - ord("0"))
        return cls(row, col)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def shift(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)


def all_squares() -> list[Square]:
    """All 64 squares, row by row"""
    num_rows, num_cols = BOARD_DIMENSIONS
    return [Square(row, col) for row in range(num_rows) for col in range(num_cols)]
