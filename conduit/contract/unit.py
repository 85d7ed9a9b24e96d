"""The ``Unit`` sentinel standing in for "no response"."""

from typing import Any, Final


class Unit:
    """Singleton value returned through the pipeline by requests without a response.

    Only one instance exists for the life of the process. It carries no data,
    compares equal only to itself, and survives copying and pickling unchanged.
    """

    __slots__ = ()

    _instance: "Unit | None" = None

    def __new__(cls) -> "Unit":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **kwargs: Any) -> None:
        raise TypeError("Unit cannot be subclassed")

    def __repr__(self) -> str:
        return "Unit"

    def __bool__(self) -> bool:
        return False

    def __hash__(self) -> int:
        return 0

    def __eq__(self, other: object) -> bool:
        return other is self

    def __copy__(self) -> "Unit":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "Unit":
        return self

    def __reduce__(self) -> tuple[type["Unit"], tuple[()]]:
        return (Unit, ())

    @classmethod
    def value(cls) -> "Unit":
        """Return the single ``Unit`` instance."""
        return cls()


UNIT: Final[Unit] = Unit()
