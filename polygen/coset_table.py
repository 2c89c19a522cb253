"""
Todd-Coxeter coset enumeration using the HLT (Haselgrove, Leech and Trotter) strategy.

Generators are single letters. For Coxeter groups every generator is its own
inverse; otherwise the upper-case letter stands for the inverse (A = a^-1)
and relations have to state generator orders explicitly (e.g. "aaa").

Example, the symmetry group of the cube acting on its vertices:

    table = CosetTable("abc", ["babababa", "caca", "cbcbcb"], ["b", "c"])
    table.solve()
    len(table)  # 8

Coset state: each coset is either alive or merged into a smaller coset.
``_merged_into[i]`` is None for a living coset and the index of the coset it
was merged into otherwise, so ``_merged_into[i] < i`` always holds.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence

from .errors import InvariantViolation, IterationLimitExceeded

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100_000


class CosetTable:
    """Coset table of the subgroup H generated by ``subgroup`` in the group G
    presented by ``generators`` and ``relations``.

    Args:
        generators: Generator letters of G (e.g. "abc"). Inverses may be omitted.
        relations: Relator words, each equal to the identity (e.g. ["ababab"]).
        subgroup: Generator words of the subgroup H (e.g. ["a", "c"]).
        coxeter: If True every generator is self-inverse.
    """

    def __init__(self, generators: str, relations: Sequence[str], subgroup: Sequence[str], coxeter: bool = True):
        char2int: Dict[str, int] = {}
        alphabet = ""
        for char in generators:
            c = char.lower()
            if c in char2int:
                continue
            char2int[c] = len(alphabet)
            alphabet += c
            if not coxeter:
                inverse = c.upper()
                if inverse == c:
                    raise ValueError(f"Generator {c} has no uppercase equivalent to use as its inverse")
                char2int[inverse] = len(alphabet)
                alphabet += inverse

        self._alphabet = alphabet
        self._char2int = char2int
        self._coxeter = coxeter
        self._gen_count = len(alphabet)
        self._relations = [self._encode(word, "relation") for word in relations]
        self._subgroup = [self._encode(word, "subgroup generator") for word in subgroup]

        # Only coset 0 exists initially
        self._table: List[List[Optional[int]]] = [[None] * self._gen_count]
        self._merged_into: List[Optional[int]] = [None]
        self._dead_queue: Deque[int] = deque()
        self._solved = False

    def _encode(self, word: str, kind: str) -> List[int]:
        encoded = []
        for char in word:
            g = self._char2int.get(char)
            if g is None:
                raise ValueError(f"Invalid generator {char} in {kind} {word}")
            encoded.append(g)
        return encoded

    def _inv(self, g: int) -> int:
        return g if self._coxeter else g ^ 1

    # -------------------- Table primitives --------------------

    def _deduce(self, coset_a: int, coset_b: int, gen: int):
        """Register that coset_a * gen = coset_b."""
        self._table[coset_a][gen] = coset_b
        self._table[coset_b][self._inv(gen)] = coset_a

    def _define(self, coset: int, gen: int):
        """Create a new coset equal to coset * gen."""
        new = len(self._table)
        self._table.append([None] * self._gen_count)
        self._merged_into.append(None)
        self._deduce(coset, new, gen)

    def _is_alive(self, coset: int) -> bool:
        return self._merged_into[coset] is None

    def _rep(self, coset: int) -> int:
        """Smallest coset equivalent to ``coset``, compressing the chain on the way."""
        root = coset
        while self._merged_into[root] is not None:
            root = self._merged_into[root]

        while coset != root:
            nxt = self._merged_into[coset]
            self._merged_into[coset] = root
            coset = nxt
        return root

    def _merge(self, coset_a: int, coset_b: int):
        """Declare two cosets equal; the larger representative dies."""
        a = self._rep(coset_a)
        b = self._rep(coset_b)
        if a != b:
            keep, dead = min(a, b), max(a, b)
            self._merged_into[dead] = keep
            self._dead_queue.append(dead)

    def _coincidence(self, coset_a: int, coset_b: int):
        """Process coset_a = coset_b and every coincidence it implies."""
        self._merge(coset_a, coset_b)

        while self._dead_queue:
            dead = self._dead_queue.popleft()
            for g in range(self._gen_count):
                nxt = self._table[dead][g]
                if nxt is None:
                    continue
                # Detach the dead coset, then move the transition onto the representatives
                self._table[nxt][self._inv(g)] = None

                dead_rep = self._rep(dead)
                next_rep = self._rep(nxt)
                existing_next = self._table[dead_rep][g]
                existing_dead = self._table[next_rep][self._inv(g)]
                if existing_next is not None and existing_next != next_rep:
                    self._merge(next_rep, existing_next)
                elif existing_dead is not None and existing_dead != dead_rep:
                    self._merge(dead_rep, existing_dead)
                else:
                    self._deduce(dead_rep, next_rep, g)

    def _scan_and_fill(self, coset: int, word: List[int]):
        """Trace ``word`` from ``coset`` in both directions, defining cosets until it closes."""
        left = right = coset
        lp = 0
        rp = len(word) - 1

        for _ in range(len(word) + 1):
            # Forward as far as possible
            while lp <= rp and self._table[left][word[lp]] is not None:
                left = self._table[left][word[lp]]
                lp += 1

            if lp > rp:
                if left != right:
                    self._coincidence(left, right)
                return

            # Backward until it meets the forward scan
            while rp >= lp and self._table[right][self._inv(word[rp])] is not None:
                right = self._table[right][self._inv(word[rp])]
                rp -= 1

            if rp < lp:
                self._coincidence(left, right)
                return

            if rp == lp:
                self._deduce(left, right, word[lp])
                return

            self._define(left, word[lp])

        raise InvariantViolation(f"Scan of word {word} from coset {coset} did not close")

    # -------------------- Enumeration --------------------

    def _hlt(self, max_iterations: int):
        for word in self._subgroup:
            self._scan_and_fill(0, word)

        current = 0
        iterations = 0
        while current < len(self._table):
            if iterations >= max_iterations:
                raise IterationLimitExceeded(max_iterations, len(self._table))
            iterations += 1

            for rel in self._relations:
                if not self._is_alive(current):
                    break
                self._scan_and_fill(current, rel)

            if self._is_alive(current):
                row = self._table[current]
                for g in range(self._gen_count):
                    if row[g] is None:
                        self._define(current, g)

            current += 1

    def _compress(self):
        """Drop the dead cosets and renumber the living ones contiguously."""
        ind = -1
        for coset in range(len(self._table)):
            if not self._is_alive(coset):
                continue
            ind += 1
            if ind == coset:
                continue
            for g in range(self._gen_count):
                nxt = self._table[coset][g]
                if nxt == coset:
                    self._table[ind][g] = ind
                elif nxt is None:
                    raise InvariantViolation("Coset table compressed before it was complete")
                else:
                    self._deduce(ind, nxt, g)

        del self._table[ind + 1:]
        self._merged_into = [None] * len(self._table)

    def solve(self, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        """Enumerate the cosets. Raises IterationLimitExceeded if the bound is hit."""
        if self._solved:
            return
        self._hlt(max_iterations)
        defined = len(self._table)
        self._compress()
        self._solved = True
        LOGGER.debug(
            "Solved coset table over %s with %d subgroup generators: %d cosets (%d defined)",
            self._alphabet, len(self._subgroup), len(self._table), defined,
        )

    # -------------------- Queries --------------------

    @property
    def alphabet(self) -> str:
        """All generator letters, inverses included, indexed by generator number."""
        return self._alphabet

    @property
    def is_solved(self) -> bool:
        return self._solved

    def __len__(self) -> int:
        return len(self._table)

    def get_entry(self, coset: int, gen: int) -> Optional[int]:
        return self._table[coset][gen]

    def apply_word(self, coset: int, word: str) -> int:
        """Coset reached from ``coset`` by applying the letters of ``word`` in order."""
        result = coset
        for char in word:
            g = self._char2int.get(char)
            if g is None:
                raise ValueError(f"Invalid generator {char} in word {word}")
            nxt = self._table[result][g]
            if nxt is None:
                raise InvariantViolation(
                    f"Error applying {word} to coset {coset}, is the coset table solved?"
                )
            result = nxt
        return result

    def get_representatives(self) -> List[str]:
        """Shortest word reaching each coset from coset 0, in coset order."""
        step = 1 if self._coxeter else 2
        words: List[Optional[List[int]]] = [None] * len(self._table)
        words[0] = []
        queue = deque([0])
        while queue:
            coset = queue.popleft()
            for g in range(0, self._gen_count, step):
                nxt = self._table[coset][g]
                if nxt is None:
                    raise InvariantViolation("Found empty entry, is the coset table solved?")
                if words[nxt] is None:
                    words[nxt] = words[coset] + [g]
                    queue.append(nxt)

        if any(w is None for w in words):
            raise InvariantViolation("Some cosets are unreachable from coset 0")
        return ["".join(self._alphabet[g] for g in word) for word in words]


__all__ = ["CosetTable", "DEFAULT_MAX_ITERATIONS"]
