from __future__ import annotations

from pipekit import prelude as P


def is_even(n: int) -> bool:
    return n % 2 == 0


def sum_evens(values: list[int]) -> int:
    return P.sum(P.each(values) | P.filter(is_even))


if __name__ == "__main__":
    print(sum_evens([1, 2, 3, 4, 5]))
