from __future__ import annotations

from collections import Counter
from functools import lru_cache
from typing import Tuple, Union

# --- Plan node types ------------------------------------------------
# ("name", <str>)
# ("pow", <plan>, <int>)
# ("mul", <plan>, <plan>)
# ("div", <plan>, <plan>)
Plan = Tuple[str, Union[str, int, "Plan"], Union[int, "Plan", None]]


class UnitParseError(ValueError):
    """Raised when a unit expression cannot be parsed."""

    def __init__(self, message: str, text: str, position: int | None = None) -> None:
        pointer = ""
        if position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.text = text
        self.position = position


# ---------------- Parser that builds a PLAN (no registry lookups!) ----------------
class _UnitExprParser:
    """
    Grammar (no numbers except signed integers after **):
      expr   := term (('*' | '/') term)*
      term   := factor ['**' signed_int]?
      factor := NAME | '(' expr ')'
      NAME   := [A-Za-z_][A-Za-z0-9_]*
      signed_int := ['+'|'-']? [0-9]+
    """
    def __init__(self, text: str):
        self.s = text
        self.n = len(text)
        self.i = 0

    def parse(self) -> Plan:
        plan = self._parse_expr()
        self._skip_ws()
        if self.i != self.n:
            raise UnitParseError(f"Unexpected trailing input {self.s[self.i:self.i+10]!r}", self.s, self.i)
        return plan

    # expr := term (('*' | '/') term)*
    def _parse_expr(self) -> Plan:
        left = self._parse_term()
        while True:
            self._skip_ws()
            if self._peek('*') and not self._peek('**'):
                self._eat('*')
                right = self._parse_term()
                left = ("mul", left, right)
            elif self._peek('/'):
                self._eat('/')
                right = self._parse_term()
                left = ("div", left, right)
            else:
                break
        return left

    # term := factor ['**' signed_int]?
    def _parse_term(self) -> Plan:
        base = self._parse_factor()
        self._skip_ws()
        if self._peek('**'):
            self._eat('**')
            exp = self._parse_signed_int()
            base = ("pow", base, exp)
        return base

    # factor := NAME | '(' expr ')'
    def _parse_factor(self) -> Plan:
        self._skip_ws()
        if self._peek('('):
            self._eat('(')
            val = self._parse_expr()
            self._skip_ws()
            self._eat(')')
            return val
        name = self._parse_name()
        if not name:
            ch = self.s[self.i:self.i+1]
            raise UnitParseError(f"Expected unit name or '(', got {ch!r}", self.s, self.i)
        return ("name", name, None)

    # ---- token helpers ----
    def _parse_name(self) -> str | None:
        self._skip_ws()
        i0 = self.i
        if i0 < self.n and (self.s[i0].isalpha() or self.s[i0] == '_'):
            self.i += 1
            while self.i < self.n and (self.s[self.i].isalnum() or self.s[self.i] == '_'):
                self.i += 1
            return self.s[i0:self.i]
        return None

    def _parse_signed_int(self) -> int:
        self._skip_ws()
        i0 = self.i
        if self.i < self.n and self.s[self.i] in '+-':
            self.i += 1
        i1 = self.i
        while self.i < self.n and self.s[self.i].isdigit():
            self.i += 1
        if i1 == self.i:
            raise UnitParseError("Expected integer exponent", self.s, self.i)
        return int(self.s[i0:self.i])

    def _skip_ws(self) -> None:
        s, n, i = self.s, self.n, self.i
        while i < n and s[i].isspace():
            i += 1
        self.i = i

    def _peek(self, tok: str) -> bool:
        self._skip_ws()
        if tok == '**':
            return self.s[self.i:self.i+2] == '**'
        return self.i < self.n and self.s[self.i] == tok

    def _eat(self, tok: str) -> None:
        if not self._peek(tok):
            got = self.s[self.i:self.i+len(tok)]
            raise UnitParseError(f"Expected {tok!r}, got {got!r}", self.s, self.i)
        self.i += len(tok)


# ---------------- Evaluation of a plan into name multisets ----------------
def _collect(plan: Plan, sign: int, num: Counter, den: Counter) -> None:
    """Add every name in `plan` to `num` (sign > 0) or `den` (sign < 0).

    Nothing cancels: 'm/m' yields m on both sides, so a unit system can still
    reject it as simplifiable.
    """
    kind = plan[0]
    if kind == "name":
        target = num if sign > 0 else den
        target[plan[1]] += abs(sign)
    elif kind == "pow":
        _collect(plan[1], sign * plan[2], num, den)  # type: ignore[operator]
    elif kind == "mul":
        _collect(plan[1], sign, num, den)  # type: ignore[arg-type]
        _collect(plan[2], sign, num, den)  # type: ignore[arg-type]
    elif kind == "div":
        _collect(plan[1], sign, num, den)  # type: ignore[arg-type]
        _collect(plan[2], -sign, num, den)  # type: ignore[arg-type]
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


# ---------------- Public API with caching-safe compilation ----------------
@lru_cache(maxsize=4096)
def _compile_unit_expr(expr: str) -> Plan:
    disallowed = set('~!@#$%^&|=,:;?<>\'\"`\\[]{}')
    for i, c in enumerate(expr):
        if c in disallowed:
            raise UnitParseError(
                "Only *, /, **, parentheses, unit names, and signed integer exponents are allowed.",
                expr, i,
            )
    return _UnitExprParser(expr).parse()


def parse_unit_expr(expr: str) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    """
    Parse a unit expression like 'kg*m/(s**2)' into numerator and denominator names.

    Each name is repeated once per power, e.g. 'm**2/s' gives
    (('m', 'm'), ('s',)). A zero exponent drops the name; a negative one moves
    it to the other side. Names are not resolved here, any registry may be
    used afterwards. Raises `UnitParseError` on malformed input.
    """
    plan = _compile_unit_expr(expr)
    num: Counter = Counter()
    den: Counter = Counter()
    _collect(plan, 1, num, den)
    return tuple(num.elements()), tuple(den.elements())


__all__ = ["UnitParseError", "parse_unit_expr"]
