from enum import Enum
from typing import Any, NoReturn, TypeVar

T = TypeVar("T")


class EnumValues(Enum):
    @classmethod
    def values(cls) -> list[Any]:
        return [value.value for value in cls]


class EnumAutoStr(str, EnumValues):
    @staticmethod
    def _generate_next_value_(name: str, start: int, count: int, last_values: list[Any]) -> str:
        return name

    def __str__(self) -> str:
        return str(self.value)


def assert_some(result: T | None) -> T:
    assert result is not None
    return result


def assert_never(value: NoReturn) -> NoReturn:
    raise AssertionError(f"Unhandled value: {value!r}")
