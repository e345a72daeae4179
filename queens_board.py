"""
Board: the static description of a Queens puzzle.

A board is N x M cells, each cell belongs to exactly one color region.
Cells are addressed by their row-major index (index = row * cols + col), the same
numbering the game page uses in its data-cell-idx attribute.
Once built the board never changes, so one instance can be handed to as many solver calls as you like.
"""

import json


DIAGONALS = [(-1, -1), (-1, 1), (1, -1), (1, 1)]


class InvalidInput(ValueError):
    """Raised when the raw input can't be turned into a consistent board."""


class Board:
    """
    Immutable puzzle instance.

    Args:
    - rows, cols: positive integers.
    - cell_colors: sequence with one color per cell (row-major). Colors are opaque tokens (ints, strings, ...).
    - colors: optional collection of color ids. Defaults to the colors found in cell_colors.
    """

    def __init__(self, rows, cols, cell_colors, colors=None):
        for name, value in (("rows", rows), ("cols", cols)):
            # bool is an int subclass, but True rows is surely a mistake
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(f"{name} must be an integer, got {value!r}")
            if value <= 0:
                raise InvalidInput(f"{name} must be positive, got {value}")

        cell_colors = tuple(cell_colors)
        if len(cell_colors) != rows * cols:
            raise InvalidInput(f"expected {rows * cols} cell colors for a {rows}x{cols} board, got {len(cell_colors)}")

        for idx, color in enumerate(cell_colors):
            if color is None:
                raise InvalidInput(f"cell {idx} has no color")
            try:
                hash(color)
            except TypeError:
                raise InvalidInput(f"cell {idx} has a malformed color {color!r}") from None

        if colors is None:
            colors = frozenset(cell_colors)
        else:
            try:
                colors = frozenset(colors)
            except TypeError:
                raise InvalidInput(f"malformed color list {colors!r}") from None
            unknown = set(cell_colors) - colors
            if unknown:
                raise InvalidInput(f"cells use colors that are not declared: {sorted(map(repr, unknown))}")

        # Pre-computed table of diagonal neighbours, the solver asks for these on every placement
        neighbors = []
        for r in range(rows):
            for c in range(cols):
                neighbors.append(tuple(
                    (r + dr) * cols + (c + dc)
                    for dr, dc in DIAGONALS
                    if 0 <= r + dr < rows and 0 <= c + dc < cols
                ))

        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "cols", cols)
        object.__setattr__(self, "cell_colors", cell_colors)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(self, "_neighbors", tuple(neighbors))

    def __setattr__(self, name, value):
        raise AttributeError("Board is immutable")

    def __delattr__(self, name):
        raise AttributeError("Board is immutable")

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (self.rows, self.cols, self.cell_colors, self.colors) == (other.rows, other.cols, other.cell_colors, other.colors)

    def __hash__(self):
        return hash((self.rows, self.cols, self.cell_colors, self.colors))

    def __repr__(self):
        return f"Board(rows={self.rows}, cols={self.cols}, colors={len(self.colors)})"

    @property
    def size(self):
        return self.rows * self.cols

    def in_bounds(self, row, col):
        return 0 <= row < self.rows and 0 <= col < self.cols

    def index(self, row, col):
        if not self.in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside a {self.rows}x{self.cols} board")
        return row * self.cols + col

    def row_col(self, idx):
        if not 0 <= idx < self.size:
            raise IndexError(f"cell index {idx} is outside a {self.rows}x{self.cols} board")
        return divmod(idx, self.cols)

    def color_of(self, idx):
        return self.cell_colors[idx]

    def diagonal_neighbors(self, idx):
        """Indices of the (up to four) on-board cells one row and one column away."""
        return self._neighbors[idx]

    def cells_of(self, color):
        return [idx for idx, c in enumerate(self.cell_colors) if c == color]

    # --- construction from raw input ---

    @classmethod
    def from_grid(cls, grid, colors=None):
        """
        Build a board from a 2D list of colors (one inner list per row), the shape the page scraper produces.
        """
        grid = [list(row) for row in grid]
        if not grid or not grid[0]:
            raise InvalidInput("grid is empty")
        cols = len(grid[0])
        for r, row in enumerate(grid):
            if len(row) != cols:
                raise InvalidInput(f"row {r} has {len(row)} cells, expected {cols}")
        return cls(len(grid), cols, [color for row in grid for color in row], colors)

    @classmethod
    def from_text(cls, text):
        """
        Build a board from plain text: one line per row, color tokens separated by whitespace.
        Empty lines and lines starting with '#' are skipped.
        """
        grid = [line.split() for line in text.splitlines() if line.strip() and not line.lstrip().startswith("#")]
        return cls.from_grid(grid)

    @classmethod
    def from_dict(cls, data):
        """
        Build a board from the transport encoding:
        {"rows": 8, "cols": 8, "colors": [...], "idxToColor": [...]}
        The per-cell list may also be called "cellColor". It can be a list or an {index: color} mapping.
        """
        if not isinstance(data, dict):
            raise InvalidInput(f"expected an object, got {type(data).__name__}")

        try:
            rows = data["rows"]
            cols = data["cols"]
        except KeyError as e:
            raise InvalidInput(f"missing field {e.args[0]!r}") from None

        cell_colors = data.get("idxToColor", data.get("cellColor"))
        if cell_colors is None:
            raise InvalidInput("missing field 'idxToColor'")

        if isinstance(cell_colors, dict):
            # keys come back as strings after a JSON round trip
            try:
                mapping = {int(k): v for k, v in cell_colors.items()}
            except (TypeError, ValueError):
                raise InvalidInput("cell indices must be integers") from None
            if not isinstance(rows, int) or not isinstance(cols, int):
                raise InvalidInput("rows and cols must be integers")
            missing = [idx for idx in range(max(rows * cols, 0)) if idx not in mapping]
            if missing:
                raise InvalidInput(f"cells without a color: {missing}")
            if len(mapping) != rows * cols:
                raise InvalidInput("cell mapping has indices outside the board")
            cell_colors = [mapping[idx] for idx in range(rows * cols)]
        elif not isinstance(cell_colors, list):
            raise InvalidInput("'idxToColor' must be a list or an object")

        return cls(rows, cols, cell_colors, data.get("colors"))

    @classmethod
    def from_json(cls, text):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidInput(f"board is not valid JSON: {e}") from None
        return cls.from_dict(data)

    def to_dict(self):
        colors = list(self.colors)
        try:
            colors.sort()
        except TypeError:
            pass  # mixed token types have no order, keep them as they come
        return {
            "rows": self.rows,
            "cols": self.cols,
            "colors": colors,
            "idxToColor": list(self.cell_colors),
        }

    def to_json(self):
        return json.dumps(self.to_dict())
