import sys

from rich.pretty import pprint

from cmdfriend import *

VSCODE_KEY = 2

options = [
    Descriptor("where", "w", OPTIONAL, 1, "Where to create the project"),
    Descriptor("output", "o", ALIAS),
    Descriptor("folder", "f", ALIAS),
    Descriptor("module", "M", OPTIONAL, 1, "To generate a module template in the folder specified"),
    Descriptor("mod", "m", ALIAS),
    Descriptor("verbose", "v", OPTIONAL, 0, "Verbose mode"),
    Descriptor("verbose+", "V", OPTIONAL, 0, "Verbose plusmode"),
    Descriptor("Wall", "W", OPTIONAL, 0, "Wall error mode"),
    Descriptor("vscode", VSCODE_KEY, {OPTIONAL, NO_CHAR_KEY}, 0, "Visual studio code .vscode folder with .json configuration files"),
]


def callback(key, argument, index, namespace):
    match key:
        case "w" | "o" | "f":
            namespace["project"] = argument
        case "M" | "m":
            namespace["module"] = argument
        case "v":
            namespace["verbose"] = True
        case "V" | "W":
            namespace.setdefault("extras", []).append(key)
        case 2:
            namespace["vscode"] = True
        case 0:
            namespace.setdefault("positionals", []).append(argument)


if __name__ == '__main__':
    namespace = {}
    parse(
        options,
        sys.argv[1:],
        callback,
        Mode(terminate=True, stream=Stream.STDOUT),
        namespace,
        info=configure(
            "Usage: [-w,-o,-f] for project or [-M,-m] for module [FILEPATH] [OPTIONS...]",
            "v1.0 - 10/08/2020",
            "Repo: https://github.com/Joao-Peterson/CMD-Friend",
        ),
    )
    pprint(namespace)
