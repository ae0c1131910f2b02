import sys

from rich.console import Console

from commandeer import *
from commandeer.utils import Unset

__prog__ = "sample"

console = Console()


def add(left, right):
    return left + right


def multiply(left, right):
    return left * right


def build():
    parser = CommandParser("sample", "Sample app for using the commandeer command line parser.")
    parser.add_global_switch("verbose", "v").set_description("print the operation before its result")
    parser.enable_auto_help()

    operands = Ref(int), Ref(int)
    for name, descr, operation in (
            ("add", "Adds two integers", add),
            ("multiply", "Multiplies two integers", multiply),
    ):
        decl = parser.root.add_subcommand(name, descr).set_unique_id(operation)
        decl.add_parameter("left").set_description("first operand").bind_to(operands[0])
        decl.add_parameter("right").set_description("second operand").bind_to(operands[1])
    return parser, operands


def main(argv=Unset):
    parser, (left, right) = build()
    try:
        parser.parse_args(argv)
    except CommandSyntaxError as error:
        report(error)
        return 2
    if parser.auto_help_triggered:
        return 0

    block = parser.last_block
    if not block.decl.has_unique_id:
        parser.print_help()
        return 1
    try:
        block.require("left")
        block.require("right")
    except OptionNotSetError as error:
        report(error)
        return 2

    operation = block.decl.get_unique_id()
    if parser.is_global_option_set("verbose"):
        console.print(f"{operation.__name__}({left.value}, {right.value})")
    console.print(operation(left.value, right.value))
    return 0


if __name__ == '__main__':
    sys.exit(main())
