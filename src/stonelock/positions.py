from __future__ import annotations


class InvalidPositionError(ValueError):
    pass


class PositionMapper:
    """Maps orientation words around the horn to disc position indices.

    Indices run clockwise from the horn, 0 being the 12 o'clock slot.
    """

    POSITION_MAP: dict[str, int] = {
        "above": 0,
        "right": 1,
        "front": 2,
        "below": 3,
        "left": 4,
        "behind": 5,
    }

    @classmethod
    def get_position_index(cls, position: str) -> int:
        try:
            return cls.POSITION_MAP[position]
        except KeyError:
            raise InvalidPositionError(f"Unknown position name: {position!r}") from None

    @classmethod
    def get_position_from_index(cls, index: int) -> str:
        for name, value in cls.POSITION_MAP.items():
            if value == index:
                return name
        raise InvalidPositionError(f"No position for index {index!r}")

    @classmethod
    def get_all_positions(cls) -> list[str]:
        return list(cls.POSITION_MAP)
