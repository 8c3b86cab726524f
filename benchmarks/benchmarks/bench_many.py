from pympc.Folds import fold_list, release_str, strfold
from pympc.Prim import run_parser, string
from pympc.Combinators import and_, many, or_


class TimeMany:
    def setup(self):
        self.parser = many(fold_list, string("a"))
        self.small = "a" * 1000
        self.medium = "a" * 10000
        self.large = "a" * 100000

    def time_many_small(self):
        run_parser(self.parser, self.small)

    def time_many_medium(self):
        run_parser(self.parser, self.medium)

    def time_many_large(self):
        run_parser(self.parser, self.large)


class TimeGreetings:
    def setup(self):
        flatmate = or_(string("Dan"), string("Chess"), string("Adam"), string("Lewis"))
        greet = and_(strfold, (string("Hello "), release_str), (flatmate, release_str))
        self.parser = many(strfold, greet)
        self.text = "Hello DanHello ChessHello AdamHello Lewis" * 1000

    def time_greetings(self):
        run_parser(self.parser, self.text)
