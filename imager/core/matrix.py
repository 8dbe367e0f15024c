"""
Imager Matrix

Dense 2D or 3D numeric container used for images and convolution kernels.

Values live in a float64 numpy array of shape (rows, cols, channels).
Single-channel matrices expose scalar cells through get()/set().
Mutating operations change the receiver in place and return it so calls
can be chained:

    >>> m = Matrix.generate(2, 2, 3).add(0.5).clamp()
"""

from typing import Callable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .errors import (
    ValidationError, MatrixIndexError, ChannelMismatchError,
    DimensionError, DivisionByZeroError
)

Number = Union[int, float]

# Red, green and blue occupy channels 0..2; alpha, when present, is channel 3.
COLOR_CHANNELS = 3
ALPHA_CHANNEL = 3


def is_int(value) -> bool:
    """True for Python and numpy integers, False for bool."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


class Matrix:
    """
    A rows x cols x channels matrix with bounds-checked access.

    Create one with generate()/load() or one of the presets
    (zeros, ones, identity, black, white, red, green, blue, random).
    """

    def __init__(self, rows: int, cols: int, channels: int = 1, fill: Number = 0.0):
        for name, value in (("rows", rows), ("cols", cols), ("channels", channels)):
            if not is_int(value) or value < 1:
                raise ValidationError(
                    f"generate: {name} must be a positive integer, got {value!r}"
                )
        self._data = np.full((int(rows), int(cols), int(channels)), float(fill))

    @classmethod
    def _wrap(cls, data: np.ndarray) -> 'Matrix':
        """Adopt a 3D float array without copying."""
        matrix = cls.__new__(cls)
        matrix._data = data
        return matrix

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def generate(cls, rows: int, cols: int, channels: int = 1,
                 fill: Number = 0.0) -> 'Matrix':
        """
        Generate a new matrix filled with a constant.

        Args:
            rows: Number of rows (positive integer)
            cols: Number of columns (positive integer)
            channels: Number of channels per cell (positive integer)
            fill: Initial value of every element

        Raises:
            ValidationError: If any dimension is not a positive integer
        """
        return cls(rows, cols, channels, fill)

    @classmethod
    def load(cls, literal) -> 'Matrix':
        """
        Load a pre-built 2D (scalar cells) or 3D (channel lists) literal.

        Accepts nested lists/tuples or a numpy array. The data is copied.
        """
        try:
            data = np.array(literal, dtype=np.float64)
        except (ValueError, TypeError) as err:
            raise ValidationError(f"load: matrix literal is ragged or not numeric ({err})") from err

        if data.ndim == 2:
            data = data[:, :, np.newaxis]
        elif data.ndim != 3:
            raise ValidationError(f"load: matrix must be 2D or 3D, got {data.ndim}D")

        if 0 in data.shape:
            raise ValidationError(f"load: matrix must not be empty, got shape {data.shape}")

        return cls._wrap(data)

    @classmethod
    def zeros(cls, rows: int, cols: int, channels: int = 1) -> 'Matrix':
        return cls(rows, cols, channels, 0.0)

    @classmethod
    def ones(cls, rows: int, cols: int, channels: int = 1) -> 'Matrix':
        return cls(rows, cols, channels, 1.0)

    @classmethod
    def identity(cls, size: int = 3) -> 'Matrix':
        """Square single-channel identity matrix."""
        matrix = cls(size, size, 1, 0.0)
        np.fill_diagonal(matrix._data[:, :, 0], 1.0)
        return matrix

    @classmethod
    def black(cls, rows: int, cols: int, channels: int = 4) -> 'Matrix':
        """Opaque black image."""
        return cls._solid(rows, cols, channels, None)

    @classmethod
    def white(cls, rows: int, cols: int, channels: int = 4) -> 'Matrix':
        """Opaque white image."""
        return cls(rows, cols, channels, 1.0)

    @classmethod
    def red(cls, rows: int, cols: int, channels: int = 4) -> 'Matrix':
        return cls._solid(rows, cols, channels, 0)

    @classmethod
    def green(cls, rows: int, cols: int, channels: int = 4) -> 'Matrix':
        return cls._solid(rows, cols, channels, 1)

    @classmethod
    def blue(cls, rows: int, cols: int, channels: int = 4) -> 'Matrix':
        return cls._solid(rows, cols, channels, 2)

    @classmethod
    def _solid(cls, rows: int, cols: int, channels: int,
               channel: Optional[int]) -> 'Matrix':
        matrix = cls(rows, cols, channels, 0.0)
        if channel is not None:
            matrix.fill_channel(channel, 1.0)
        if matrix.channels > ALPHA_CHANNEL:
            matrix.fill_alpha(1.0)
        return matrix

    @classmethod
    def random(cls, rows: int, cols: int, channels: int = 1,
               seed: Optional[int] = None) -> 'Matrix':
        """Matrix of uniform random values in [0, 1)."""
        matrix = cls(rows, cols, channels)
        rng = np.random.default_rng(seed)
        matrix._data[...] = rng.random(matrix._data.shape)
        return matrix

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def channels(self) -> int:
        return self._data.shape[2]

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self._data.shape

    @property
    def size_label(self) -> str:
        """Formatted dimensions, e.g. '3x3' or '480x640x4'."""
        if self.channels == 1:
            return f"{self.rows}x{self.cols}"
        return f"{self.rows}x{self.cols}x{self.channels}"

    @property
    def array(self) -> np.ndarray:
        """The backing (rows, cols, channels) array. Writes go to the matrix."""
        return self._data

    def color_view(self) -> np.ndarray:
        """View of the colour channels 0..2, never alpha."""
        self._require_color("color_view")
        return self._data[:, :, :COLOR_CHANNELS]

    def __repr__(self) -> str:
        return f"Matrix({self.size_label})"

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------

    def _check_index(self, row, col, channel=None) -> None:
        indices = (row, col) if channel is None else (row, col, channel)
        limits = self._data.shape[:len(indices)]
        for index, limit in zip(indices, limits):
            if not is_int(index) or index < 0 or index >= limit:
                raise MatrixIndexError(
                    f"Index {indices} is out of range for the matrix size "
                    f"({self.rows}x{self.cols}x{self.channels})"
                )

    def _require_color(self, operation: str) -> None:
        if self.channels < COLOR_CHANNELS:
            raise ChannelMismatchError(
                f"{operation}: needs at least {COLOR_CHANNELS} channels, "
                f"matrix has {self.channels}"
            )

    def _cells(self) -> np.ndarray:
        """Cell view: 2D for single-channel matrices, 3D otherwise."""
        if self.channels == 1:
            return self._data[:, :, 0]
        return self._data

    def get(self, row: int, col: int, channel: Optional[int] = None):
        """
        Get the value at (row, col[, channel]).

        Returns a float when a channel is given or the matrix has one channel,
        otherwise a copy of the pixel's channel vector.

        Raises:
            MatrixIndexError: On any negative or out-of-range index
        """
        self._check_index(row, col, channel)
        if channel is not None:
            return float(self._data[row, col, channel])
        if self.channels == 1:
            return float(self._data[row, col, 0])
        return self._data[row, col].copy()

    def set(self, row: int, col: int, value, channel: Optional[int] = None) -> 'Matrix':
        """
        Set the value at (row, col[, channel]).

        Without a channel a scalar fills every channel of the cell and a
        sequence must supply one value per channel.
        """
        self._check_index(row, col, channel)
        if channel is not None:
            self._data[row, col, channel] = value
            return self

        values = np.asarray(value, dtype=np.float64)
        if values.ndim > 0 and values.shape != (self.channels,):
            raise ChannelMismatchError(
                f"set: expected {self.channels} channel values at ({row}, {col}), "
                f"got shape {values.shape}"
            )
        self._data[row, col] = values
        return self

    def get_row(self, row: int) -> np.ndarray:
        self._check_index(row, 0)
        return self._cells()[row].copy()

    def get_col(self, col: int) -> np.ndarray:
        self._check_index(0, col)
        return self._cells()[:, col].copy()

    def set_row(self, row: int, values) -> 'Matrix':
        """Replace a full row; values must match the row's shape."""
        self._check_index(row, 0)
        cells = self._cells()
        values = np.asarray(values, dtype=np.float64)
        if values.shape != cells[row].shape:
            raise DimensionError(
                f"set_row: row shape {values.shape} does not match {cells[row].shape}"
            )
        cells[row] = values
        return self

    def set_col(self, col: int, values) -> 'Matrix':
        """Replace a full column; values must match the column's shape."""
        self._check_index(0, col)
        cells = self._cells()
        values = np.asarray(values, dtype=np.float64)
        if values.shape != cells[:, col].shape:
            raise DimensionError(
                f"set_col: column shape {values.shape} does not match {cells[:, col].shape}"
            )
        cells[:, col] = values
        return self

    def set_pixel(self, row: int, col: int, r: Number, g: Number, b: Number,
                  a: Optional[Number] = None) -> 'Matrix':
        """
        Write the red, green and blue channels of one pixel.

        Alpha is written only when the matrix has a fourth channel and `a`
        is given.
        """
        self._require_color("set_pixel")
        self._check_index(row, col)
        self._data[row, col, :COLOR_CHANNELS] = (r, g, b)
        if a is not None and self.channels > ALPHA_CHANNEL:
            self._data[row, col, ALPHA_CHANNEL] = a
        return self

    # ------------------------------------------------------------------
    # Fills
    # ------------------------------------------------------------------

    def fill(self, value: Number) -> 'Matrix':
        self._data.fill(value)
        return self

    def fill_channel(self, channel: int, value: Number) -> 'Matrix':
        """Fill one channel of every cell."""
        if not is_int(channel) or not 0 <= channel < self.channels:
            raise MatrixIndexError(
                f"Channel {channel!r} is out of range for the matrix size ({self.size_label})"
            )
        self._data[:, :, channel] = value
        return self

    def fill_red(self, value: Number) -> 'Matrix':
        return self.fill_channel(0, value)

    def fill_green(self, value: Number) -> 'Matrix':
        return self.fill_channel(1, value)

    def fill_blue(self, value: Number) -> 'Matrix':
        return self.fill_channel(2, value)

    def fill_alpha(self, value: Number) -> 'Matrix':
        return self.fill_channel(ALPHA_CHANNEL, value)

    def fill_pixel(self, r: Number, g: Number, b: Number,
                   a: Optional[Number] = None) -> 'Matrix':
        """Fill every pixel with the same colour (and alpha, if given)."""
        self._require_color("fill_pixel")
        self._data[:, :, :COLOR_CHANNELS] = (r, g, b)
        if a is not None and self.channels > ALPHA_CHANNEL:
            self._data[:, :, ALPHA_CHANNEL] = a
        return self

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def iter_cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (row, col) once."""
        for row in range(self.rows):
            for col in range(self.cols):
                yield row, col

    def iter_elements(self) -> Iterator[Tuple[int, int, int]]:
        """Yield every (row, col, channel); channel is 0 for single-channel matrices."""
        for row in range(self.rows):
            for col in range(self.cols):
                for channel in range(self.channels):
                    yield row, col, channel

    def iter_color_channels(self) -> Iterator[Tuple[int, int, int]]:
        """Yield (row, col, channel) for channels 0..2 of every pixel, skipping alpha."""
        self._require_color("iter_color_channels")
        for row in range(self.rows):
            for col in range(self.cols):
                for channel in range(COLOR_CHANNELS):
                    yield row, col, channel

    def for_each_cell(self, callback: Callable[[int, int], None]) -> 'Matrix':
        for row, col in self.iter_cells():
            callback(row, col)
        return self

    def for_each_element(self, callback: Callable[[int, int, int], None]) -> 'Matrix':
        for row, col, channel in self.iter_elements():
            callback(row, col, channel)
        return self

    def for_each_color_channel(self, callback: Callable[[int, int, int], None]) -> 'Matrix':
        for row, col, channel in self.iter_color_channels():
            callback(row, col, channel)
        return self

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add(self, value: Number) -> 'Matrix':
        self._data += value
        return self

    def sub(self, value: Number) -> 'Matrix':
        self._data -= value
        return self

    def mul(self, value: Number) -> 'Matrix':
        self._data *= value
        return self

    def div(self, value: Number) -> 'Matrix':
        """Divide every element by a scalar."""
        if value == 0:
            raise DivisionByZeroError(f"div: cannot divide matrix ({self.size_label}) by 0")
        self._data /= value
        return self

    def accumulate(self, row: int, col: int, value: Number,
                   channel: Optional[int] = None) -> 'Matrix':
        """Add a value to one element (or every channel of one cell)."""
        self._check_index(row, col, channel)
        if channel is None:
            self._data[row, col] += value
        else:
            self._data[row, col, channel] += value
        return self

    def _require_same_shape(self, other: 'Matrix', operation: str) -> None:
        if self.shape != other.shape:
            raise DimensionError(
                f"{operation}: matrices must be the same size: "
                f"[{self.size_label}] vs [{other.size_label}]"
            )

    def add_matrix(self, other: 'Matrix', channels: Optional[int] = None) -> 'Matrix':
        """Elementwise sum over the first `channels` channels (all by default)."""
        self._require_same_shape(other, "add_matrix")
        limit = self.channels if channels is None else channels
        self._data[:, :, :limit] += other._data[:, :, :limit]
        return self

    def sub_matrix(self, other: 'Matrix', channels: Optional[int] = None) -> 'Matrix':
        """Elementwise difference over the first `channels` channels (all by default)."""
        self._require_same_shape(other, "sub_matrix")
        limit = self.channels if channels is None else channels
        self._data[:, :, :limit] -= other._data[:, :, :limit]
        return self

    def average(self, other: 'Matrix') -> 'Matrix':
        self._require_same_shape(other, "average")
        self._data += other._data
        self._data /= 2
        return self

    def clamp(self, low: Number = 0.0, high: Number = 1.0) -> 'Matrix':
        """Clip every element into [low, high]."""
        np.clip(self._data, low, high, out=self._data)
        return self

    def to_int(self) -> 'Matrix':
        """Truncate every element toward zero."""
        np.trunc(self._data, out=self._data)
        return self

    # ------------------------------------------------------------------
    # Copying and channel count
    # ------------------------------------------------------------------

    def copy(self) -> 'Matrix':
        """Independent duplicate."""
        return Matrix._wrap(self._data.copy())

    def copy_into(self, target: 'Matrix', row_offset: int = 0,
                  col_offset: int = 0) -> 'Matrix':
        """
        Copy every element into `target` at an offset.

        The target does not grow: the copied block must fit inside it.

        Args:
            target: Matrix receiving the values
            row_offset: Row in `target` that receives row 0
            col_offset: Column in `target` that receives column 0

        Returns:
            The target matrix

        Raises:
            MatrixIndexError: If the block would fall outside `target`
            ChannelMismatchError: If channel counts differ
        """
        if target.channels != self.channels:
            raise ChannelMismatchError(
                f"copy_into: source has {self.channels} channels, target has {target.channels}"
            )
        if not is_int(row_offset) or not is_int(col_offset):
            raise MatrixIndexError(
                f"copy_into: offset ({row_offset!r}, {col_offset!r}) must be integers"
            )
        last_row = row_offset + self.rows
        last_col = col_offset + self.cols
        if (row_offset < 0 or col_offset < 0
                or last_row > target.rows or last_col > target.cols):
            raise MatrixIndexError(
                f"copy_into: [{self.size_label}] at offset ({row_offset}, {col_offset}) "
                f"does not fit in [{target.size_label}]"
            )
        target._data[row_offset:last_row, col_offset:last_col] = self._data
        return target

    def extrude_channels(self, channels: int) -> 'Matrix':
        """
        Grow to `channels` channels by repeating the last channel's value.

        Used to broadcast a single-channel kernel across an image's channels.
        """
        if not is_int(channels) or channels <= self.channels:
            raise ValidationError(
                f"extrude_channels: cannot extrude {self.channels} channels to {channels!r}"
            )
        extra = np.repeat(self._data[:, :, -1:], channels - self.channels, axis=2)
        self._data = np.concatenate([self._data, extra], axis=2)
        return self

    def reduce_channels(self, channels: int) -> 'Matrix':
        """Truncate to the first `channels` channels (scalar cells when 1)."""
        if self.channels == 1:
            raise ValidationError("reduce_channels: matrix already has 1 channel")
        if not is_int(channels) or not 1 <= channels <= self.channels:
            raise ValidationError(
                f"reduce_channels: cannot reduce {self.channels} channels to {channels!r}"
            )
        self._data = self._data[:, :, :channels].copy()
        return self

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def transpose(self) -> 'Matrix':
        self._data = self._data.transpose(1, 0, 2).copy()
        return self

    def flip_horizontal(self) -> 'Matrix':
        """Mirror column positions (left <-> right)."""
        self._data = self._data[:, ::-1].copy()
        return self

    def flip_vertical(self) -> 'Matrix':
        """Mirror row positions (top <-> bottom)."""
        self._data = self._data[::-1].copy()
        return self

    def flip_both(self) -> 'Matrix':
        """Rotate 180 degrees."""
        return self.flip_horizontal().flip_vertical()

    def swap(self, row: int, col: int, row2: int, col2: int) -> 'Matrix':
        """Swap two cells."""
        self._check_index(row, col)
        self._check_index(row2, col2)
        first = self._data[row, col].copy()
        self._data[row, col] = self._data[row2, col2]
        self._data[row2, col2] = first
        return self

    def swap_rows(self, row: int, row2: int) -> 'Matrix':
        self._check_index(row, 0)
        self._check_index(row2, 0)
        self._data[[row, row2]] = self._data[[row2, row]]
        return self

    def swap_cols(self, col: int, col2: int) -> 'Matrix':
        self._check_index(0, col)
        self._check_index(0, col2)
        self._data[:, [col, col2]] = self._data[:, [col2, col]]
        return self

    def mat_mul(self, other: 'Matrix') -> 'Matrix':
        """
        Replace this matrix with the product self x other.

        Raises:
            ChannelMismatchError: If either operand has more than one channel
            DimensionError: If self.cols != other.rows
        """
        if self.channels > 1 or other.channels > 1:
            raise ChannelMismatchError(
                f"mat_mul: operands must have 1 channel: [{self.size_label}] * [{other.size_label}]"
            )
        if self.cols != other.rows:
            raise DimensionError(
                f"mat_mul: sizes are not compatible: [{self.size_label}] * [{other.size_label}]"
            )
        product = self._data[:, :, 0] @ other._data[:, :, 0]
        self._data = product[:, :, np.newaxis]
        return self

    # ------------------------------------------------------------------
    # Queries and export
    # ------------------------------------------------------------------

    def is_all_white(self) -> bool:
        if self.channels not in (3, 4):
            return False
        return bool(np.all(self._data[:, :, :COLOR_CHANNELS] == 1))

    def is_all_black(self) -> bool:
        if self.channels not in (3, 4):
            return False
        return bool(np.all(self._data[:, :, :COLOR_CHANNELS] == 0))

    def allclose(self, other: 'Matrix', atol: float = 1e-9) -> bool:
        """True if shapes match and every element is within `atol`."""
        return self.shape == other.shape and bool(
            np.allclose(self._data, other._data, rtol=0.0, atol=atol)
        )

    def flatten(self) -> List[float]:
        """Row-major list ordered by (row, col, channel)."""
        return self._data.reshape(-1).tolist()

    def tolist(self) -> Union[List[List[float]], List[List[List[float]]]]:
        """Nested list: 2D for single-channel matrices, 3D otherwise."""
        return self._cells().tolist()
