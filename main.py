from rich.pretty import pprint

from argolis import *

tool = Command(
    "tool",
    descr="copy files somewhere else",
    version="0.1.0",
    positionals=[
        Positional("source", required=True, descr="file to copy"),
        Positional("targets", variadic=True, descr="destinations"),
    ],
    options={
        "verbose": Option(type="boolean", alias="v", descr="chatty output"),
        "maxRetries": Option(type="number", default=3, descr="attempts per file"),
        "tag": Option(type="array", alias="t", descr="labels to attach"),
    },
    colorful=True,
)


if __name__ == '__main__':
    pprint(parse_args(tool))
