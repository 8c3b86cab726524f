import sys

from pympc import and_, delete, describe, many, or_, release_str, run_parser, strfold, string

# 1. Grammar
flatmate = or_(
    string("Dan"),
    string("Chess"),
    string("Adam"),
    string("Lewis"),
)

greet = and_(strfold,
             (string("Hello "), release_str),
             (flatmate, release_str))

greetings = many(strfold, greet)

if __name__ == "__main__":
    print("Grammar:", describe(greetings))

    for text in sys.argv[1:] or ["Hello DanHello Adam", "Hello Bob", "Goodbye Dan"]:
        result, err = run_parser(greetings, text)
        if err:
            print(f"{text!r:<25} | Error: {err}")
        else:
            print(f"{text!r:<25} | {result!r}")

    # 2. The grammar is torn down once, after every run is finished
    delete(greetings)
