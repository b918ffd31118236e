from rich.pretty import pprint

from commandant import *

__prog__ = "demo"

registry = Registry()
registry.option("-v", "--verbose", descr="print the runtime context before running")


@registry.command("rmdir", descr="remove a directory")
def rmdir(dir, others, context):
    if context.get_or("verbose", False):
        pprint(context)
    pprint({
        "dir": dir,
        "others": others,
        "recursive": context.get_or("recursive", False),
        "quite": context.get("quite"),
    })


rmdir.option("-r", "--recursive", descr="remove directories and their contents recursively")
rmdir.option("-q", "--quite", arity="required", metavar="quiet", type=bool, descr="suppress the summary")
rmdir.positional("dir", descr="directory to remove")
rmdir.positional("others", nargs="*", descr="more directories to remove")


if __name__ == '__main__':
    Program(registry, version="0.1.0", descr="a commandant demo", shell=True, colorful=True).run()
