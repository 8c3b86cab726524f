from pympc import (
    and_, count, delete_all, describe, eof, fold_list, keep, many, many1, maybe, new, or_, run_parser, string
)

# 1. Lexical pieces
digit = or_(*[string(d) for d in "0123456789"]).label("digit")
number = many1(lambda ds: int("".join(ds)), digit)
spaces = many(lambda _: None, string(" "))

def lexeme(p):
    return and_(keep(0), (p, None), (spaces, None))

def symbol(s):
    return lexeme(string(s))

# 2. Recursive grammar
# expr   := term (("+" | "-") term)*
# term   := factor (("*" | "/") factor)*
# factor := number | "(" expr ")"
expr = new("expr")

factor = or_(
    lexeme(number),
    and_(keep(1), (symbol("("), None), (expr, None), (symbol(")"), None)),
)

OPS = {
    "+": lambda x, y: x + y,
    "-": lambda x, y: x - y,
    "*": lambda x, y: x * y,
    "/": lambda x, y: x / y,
}

def chain(operand, ops):
    op = or_(*[symbol(o) for o in ops]).map(OPS.get)
    step = and_(fold_list, (op, None), (operand, None))

    def fold(values):
        acc, rest = values
        for f, y in rest:
            acc = f(acc, y)
        return acc

    return and_(fold, (operand, None), (many(fold_list, step), None))

term = chain(factor, "*/")
expr.define(chain(term, "+-"))

# The whole input must be one expression
program = and_(keep(1), (spaces, None), (expr, None), (eof(), None))

# Three comma separated expressions, for the count() combinator
triple = and_(keep(0), (spaces, None),
              (count(3, fold_list, and_(keep(0), (expr, None), (maybe(symbol(",")), None))), None))

if __name__ == "__main__":
    print("expr =", describe(expr))

    test_cases = [
        "2 + 3",            # 5
        "2 + 3 * 4",        # 14 (Precedence check)
        "(2 + 3) * 4",      # 20 (Parens check)
        "10 / 2 + 3",       # 8.0
        "2 +",              # Error check
    ]
    for text in test_cases:
        result, err = run_parser(program, text)
        print(f"{text:<20} | {err if err else result}")

    print(run_parser(triple, "1, 2 * 3, (4)")[0])

    delete_all(program, triple)
