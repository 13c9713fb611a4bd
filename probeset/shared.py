from sys import stderr
from typing import Any

HASH_BITS = 64
HASH_MASK = (1 << HASH_BITS) - 1


def printf(format: str, *args: Any):
    print(format.format(*args), end="")


def printf_err(format: str, *args: Any):
    print(format.format(*args), end="", file=stderr)


def is_power_of_two(n: int) -> bool:
    return n > 0 and n & (n - 1) == 0
