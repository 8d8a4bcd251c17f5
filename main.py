from rich.console import Console
from rich.prompt import Prompt

from argosy import *
from argosy.logging_setup import init_logger


@command(
    "create", "new",
    static=("target",),
    floating=("count=1",),
    flags=("force",),
    descriptions=("target=name of the zone", "count=number of copies", "force=replace an existing zone"),
    descr="create a zone",
)
class ZoneCreate(Command):
    def execute(self, actor, arguments, /):
        actor.tell(f"created {arguments.get_string('target')} x{arguments.get_integer('count', 1, 64)}"
                   + (" (forced)" if arguments.get_flag("force") else ""))


@command("delete", "remove", static=("target",), descr="delete a zone")
class ZoneDelete(Command):
    def execute(self, actor, arguments, /):
        actor.tell(f"deleted {arguments.get_string('target')}")


@command("zone", "z", descr="manage zones")
class Zone(Command):
    def __init__(self):
        super().__init__()
        self.register_command(ZoneCreate)
        self.register_command(ZoneDelete)


class Demo(Dispatcher):
    def register_commands(self):
        self.register_command(Zone)


if __name__ == '__main__':
    console = Console()
    settings = Settings(application="demo", version=__version__, description="argosy demo host", log_level="debug")
    init_logger(level=settings.level)

    dispatcher = Demo(settings)
    actor = ServerConsole(console=console)
    while (prompt := Prompt.ask("[bold]>[/bold]", console=console, default="", show_default=False)) not in ("quit", "exit"):
        # "complete zone cr" lists the completions of "/zone cr"
        if prompt.startswith("complete "):
            console.print(dispatcher.on_tab_complete(actor, prompt.removeprefix("complete ").lstrip("/").split(" ")))
            continue
        dispatcher.dispatch(actor, prompt)
