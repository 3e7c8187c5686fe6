import random
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .words import WORD_PAIRS


@dataclass(frozen=True)
class Puzzle:
    """One round's puzzle.

    ``answer`` is what the player must produce (the source word, or the ladder
    target). ``presented`` is what the player sees: the scrambled letters, or
    the ``(start, target)`` pair.
    """
    answer: str
    presented: Union[str, Tuple[str, str]]


def generate_anagram(word: str, rng: Optional[random.Random] = None) -> str:
    """Shuffle the letters of ``word`` into an order different from the original.

    Words of length <= 1, and words made of one repeated letter, have no
    differing arrangement and are returned unchanged.
    """
    rng = rng or random
    letters = list(word)
    if len(letters) <= 1 or len(set(letters)) == 1:
        return word
    while True:
        rng.shuffle(letters)
        scrambled = ''.join(letters)
        if scrambled != word:
            return scrambled


def pick_word_pair(rng: Optional[random.Random] = None) -> Tuple[str, str]:
    return (rng or random).choice(WORD_PAIRS)


def anagram_puzzle(word: str, rng: Optional[random.Random] = None) -> Puzzle:
    word = word.upper()
    return Puzzle(answer=word, presented=generate_anagram(word, rng))


def ladder_puzzle(rng: Optional[random.Random] = None) -> Puzzle:
    start, target = pick_word_pair(rng)
    return Puzzle(answer=target, presented=(start, target))


def is_valid_anagram_solution(scrambled: str, solution: str) -> bool:
    return sorted(scrambled.upper()) == sorted(solution.strip().upper())
