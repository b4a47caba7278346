"""
Named unit steps for walker moves.

Axis 0 is the fastest-varying axis of the buffer. In 2D it is "right"
(x) and axis 1 is "up" (y); in 3D axis 1 is "front" and axis 2 is "top".
The constants are plain tuples meant to be passed to ``Walker.offset_by``
and friends.
"""

from itertools import product


class Step2D:
    """Unit steps for rank-2 buffers."""

    NEXT = (1, 0)
    PREV = (-1, 0)

    RIGHT = (1, 0)
    LEFT = (-1, 0)
    UP = (0, 1)
    DOWN = (0, -1)

    RIGHT_UP = (1, 1)
    RIGHT_DOWN = (1, -1)
    LEFT_UP = (-1, 1)
    LEFT_DOWN = (-1, -1)


class Step3D:
    """Unit steps for rank-3 buffers."""

    NEXT = (1, 0, 0)
    PREV = (-1, 0, 0)

    # Faces
    RIGHT = (1, 0, 0)
    LEFT = (-1, 0, 0)
    FRONT = (0, 1, 0)
    BACK = (0, -1, 0)
    TOP = (0, 0, 1)
    BOTTOM = (0, 0, -1)

    # Edges
    RIGHT_FRONT = (1, 1, 0)
    RIGHT_BACK = (1, -1, 0)
    RIGHT_TOP = (1, 0, 1)
    RIGHT_BOTTOM = (1, 0, -1)
    LEFT_FRONT = (-1, 1, 0)
    LEFT_BACK = (-1, -1, 0)
    LEFT_TOP = (-1, 0, 1)
    LEFT_BOTTOM = (-1, 0, -1)
    FRONT_TOP = (0, 1, 1)
    FRONT_BOTTOM = (0, 1, -1)
    BACK_TOP = (0, -1, 1)
    BACK_BOTTOM = (0, -1, -1)

    # Corners
    RIGHT_FRONT_TOP = (1, 1, 1)
    RIGHT_FRONT_BOTTOM = (1, 1, -1)
    RIGHT_BACK_TOP = (1, -1, 1)
    RIGHT_BACK_BOTTOM = (1, -1, -1)
    LEFT_FRONT_TOP = (-1, 1, 1)
    LEFT_FRONT_BOTTOM = (-1, 1, -1)
    LEFT_BACK_TOP = (-1, -1, 1)
    LEFT_BACK_BOTTOM = (-1, -1, -1)


def neighborhood(rank: int, connectivity: str = "full") -> list[tuple[int, ...]]:
    """
    Every unit step vector of the given rank.

    Args:
        rank: Number of axes
        connectivity: "full" (3**rank - 1 steps, diagonals included) or
            "face" (2 * rank axis-aligned steps)

    Returns:
        List of step tuples, never including the zero step
    """
    if rank < 1:
        raise ValueError(f"rank must be at least 1, got {rank}")

    if connectivity == "face":
        steps = []
        for axis in range(rank):
            for delta in (1, -1):
                step = [0] * rank
                step[axis] = delta
                steps.append(tuple(step))
        return steps
    elif connectivity == "full":
        return [step for step in product((-1, 0, 1), repeat=rank) if any(step)]
    else:
        raise ValueError(f"Unknown connectivity: {connectivity}")
