"""
Small formula IR for the Sudoku encodings.

Terms are integer variables (``Var``) or literals (``Const``). Formulas are
comparisons over terms plus n-ary ``Conj`` / ``Disj``, ``Not`` and
``AllDistinct``. Everything is an immutable value, so a formula built once can
be shared between threads and lowered into any number of z3 contexts with
``lower()``.
"""
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterable, Optional, Tuple, Union

import z3


# ------------------------
# Terms
# ------------------------

@dataclass(frozen=True)
class Var:
    name: str


@dataclass(frozen=True)
class Const:
    value: int


Term = Union[Var, Const]


# ------------------------
# Formulas
# ------------------------

@dataclass(frozen=True)
class Eq:
    left: Term
    right: Term


@dataclass(frozen=True)
class Le:
    left: Term
    right: Term


@dataclass(frozen=True)
class Not:
    arg: "Formula"


@dataclass(frozen=True)
class Conj:
    args: Tuple["Formula", ...]


@dataclass(frozen=True)
class Disj:
    args: Tuple["Formula", ...]


@dataclass(frozen=True)
class AllDistinct:
    terms: Tuple[Term, ...]


Formula = Union[Eq, Le, Not, Conj, Disj, AllDistinct]

TRUE = Conj(())


def _term(t: Union[Term, int]) -> Term:
    return Const(t) if isinstance(t, int) else t


def conj(*parts: Formula) -> Conj:
    """And of all ``parts``; nested conjunctions are flattened."""
    flat = []
    for p in parts:
        if isinstance(p, Conj):
            flat.extend(p.args)
        else:
            flat.append(p)
    return Conj(tuple(flat))


def disj(*parts: Formula) -> Disj:
    flat = []
    for p in parts:
        if isinstance(p, Disj):
            flat.extend(p.args)
        else:
            flat.append(p)
    return Disj(tuple(flat))


def eq(a: Union[Term, int], b: Union[Term, int]) -> Eq:
    return Eq(_term(a), _term(b))


def ne(a: Union[Term, int], b: Union[Term, int]) -> Not:
    return Not(eq(a, b))


def between(lo: int, t: Term, hi: int) -> Conj:
    """lo <= t <= hi"""
    return conj(Le(Const(lo), t), Le(t, Const(hi)))


def all_distinct(terms: Iterable[Term]) -> AllDistinct:
    return AllDistinct(tuple(terms))


def pairwise_distinct(terms: Iterable[Term]) -> Conj:
    """All pairs differ, spelled out as one disequality per unordered pair."""
    return conj(*(ne(a, b) for a, b in combinations(tuple(terms), 2)))


def variables_of(f: Formula) -> set:
    """Every ``Var`` mentioned in ``f``."""
    out = set()
    stack = [f]
    while stack:
        node = stack.pop()
        if isinstance(node, (Eq, Le)):
            out.update(t for t in (node.left, node.right) if isinstance(t, Var))
        elif isinstance(node, Not):
            stack.append(node.arg)
        elif isinstance(node, (Conj, Disj)):
            stack.extend(node.args)
        elif isinstance(node, AllDistinct):
            out.update(t for t in node.terms if isinstance(t, Var))
        else:
            raise TypeError(f"not a formula: {node!r}")
    return out


# ------------------------
# Lowering to z3
# ------------------------

class Lowering:
    """
    Translates IR into z3 expressions bound to one ``z3.Context``.
    Variables are interned by name, so the same ``Var`` always maps to the same
    z3 constant within this lowering.
    """

    def __init__(self, ctx: Optional[z3.Context] = None):
        self.ctx = ctx if ctx is not None else z3.main_ctx()
        self._symbols: Dict[str, z3.ArithRef] = {}

    def term(self, t: Term) -> z3.ArithRef:
        if isinstance(t, Var):
            sym = self._symbols.get(t.name)
            if sym is None:
                sym = z3.Int(t.name, self.ctx)
                self._symbols[t.name] = sym
            return sym
        if isinstance(t, Const):
            return z3.IntVal(t.value, self.ctx)
        raise TypeError(f"not a term: {t!r}")

    def formula(self, f: Formula) -> z3.BoolRef:
        if isinstance(f, Eq):
            return self.term(f.left) == self.term(f.right)
        if isinstance(f, Le):
            return self.term(f.left) <= self.term(f.right)
        if isinstance(f, Not):
            return z3.Not(self.formula(f.arg), self.ctx)
        if isinstance(f, Conj):
            if not f.args:
                return z3.BoolVal(True, self.ctx)
            return z3.And([self.formula(a) for a in f.args])
        if isinstance(f, Disj):
            if not f.args:
                return z3.BoolVal(False, self.ctx)
            return z3.Or([self.formula(a) for a in f.args])
        if isinstance(f, AllDistinct):
            if len(f.terms) < 2:
                return z3.BoolVal(True, self.ctx)
            return z3.Distinct(*[self.term(t) for t in f.terms])
        raise TypeError(f"not a formula: {f!r}")


def lower(f: Formula, ctx: Optional[z3.Context] = None) -> z3.BoolRef:
    """One-shot lowering of ``f`` into ``ctx`` (the z3 main context by default)."""
    return Lowering(ctx).formula(f)
