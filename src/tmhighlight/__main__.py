### Top-level functionality of the tmhighlight package as a script:
### build registries from VS Code extensions, or inspect built ones.

import argparse
from importlib import metadata
import os
import sys
import time

import tmhighlight
from tmhighlight.core.errors import TMHighlightError
from tmhighlight.core.utils import childDirectories
from tmhighlight.extensions import loadExtensions
from tmhighlight.extensions.registry import buildRegistry, loadRegistry


def languageIndex(value):
    index = int(value)
    if index < 1:
        raise argparse.ArgumentTypeError("must be at least 1 (0 is reserved)")
    return index


parser = argparse.ArgumentParser(
    prog="tmhighlight",
    description="Build and inspect syntax highlighting data from VS Code extensions.",
)
parser.add_argument(
    "-v",
    "--verbosity",
    help="verbosity level (default 1)",
    type=int,
    choices=(0, 1, 2, 3),
    default=1,
)
try:
    ver = metadata.version("tmhighlight")
except metadata.PackageNotFoundError:
    ver = "unknown"
parser.add_argument(
    "--version",
    action="version",
    version=f"tmhighlight {ver}",
    help="print version information and exit",
)
commands = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

extractCommand = commands.add_parser(
    "extract", help="build registries from a folder of extensions"
)
extractCommand.add_argument(
    "extensions",
    nargs="+",
    metavar="DIR",
    help="an extension, or a folder whose subfolders are extensions",
)
extractCommand.add_argument(
    "-o", "--output", required=True, metavar="DATA", help="data folder to write"
)
extractCommand.add_argument(
    "--start",
    type=languageIndex,
    default=1,
    help="index of the first language (default 1)",
)

languagesCommand = commands.add_parser(
    "languages", help="list the languages in a data folder"
)
languagesCommand.add_argument("data", metavar="DATA", help="data folder to read")


def findExtensions(paths):
    """Expand folders of extensions into the extensions themselves."""
    extensions = []
    for path in paths:
        if os.path.exists(os.path.join(path, "package.json")):
            extensions.append(os.path.abspath(path))
        else:
            extensions.extend(
                child
                for child in childDirectories(path)
                if os.path.exists(os.path.join(child, "package.json"))
            )
    return extensions


def extract(args):
    startTime = time.time()
    dataPath = os.path.abspath(args.output)
    extensions = loadExtensions(findExtensions(args.extensions), dataPath)
    registry = buildRegistry(extensions, start=args.start, dataPath=dataPath)
    registry.save(dataPath)
    if args.verbosity >= 1:
        totalTime = time.time() - startTime
        print(f"Wrote {registry} to {dataPath} in {totalTime:.2f} seconds.")


def listLanguages(args):
    registry = loadRegistry(args.data)
    for language in sorted(registry.languages.values(), key=lambda l: l.index):
        scope = language.scope or "(no grammar)"
        names = ", ".join((language.name,) + language.aliases)
        print(f"{language.index:4d}  {language.id} [{names}]: {scope}")


def main(argv=None):
    args = parser.parse_args(argv)
    tmhighlight.setDebuggingOptions(verbosity=args.verbosity)
    try:
        if args.command == "extract":
            extract(args)
        else:
            listLanguages(args)
    except (TMHighlightError, OSError) as e:
        print(f"tmhighlight: error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
