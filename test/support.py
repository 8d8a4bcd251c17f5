"""
Shared command tree for the behavioral tests.

    /zone (z)
        create (new) <target> [--count]
        delete (remove) <target> [-force]
        region
            start
            status      (permission level: allow)
            stop
    /warp <destination>  (registered only by tests that need it)
"""

from __future__ import annotations

from argosy import Command, Dispatcher, Settings, command


@command(
    "create", "new",
    static=("target",),
    floating=("count=1",),
    descriptions=("target=name of the zone", "count=number of copies"),
    descr="create a zone",
)
class ZoneCreate(Command):
    def execute(self, actor, arguments, /):
        actor.tell(f"created {arguments.get_string('target')} x{arguments.get_integer('count', 1, 64)}")


@command("delete", "remove", static=("target",), flags=("force",), descr="delete a zone")
class ZoneDelete(Command):
    def execute(self, actor, arguments, /):
        actor.tell(f"deleted {arguments.get_string('target')}" + (" (forced)" if arguments.get_flag("force") else ""))


@command("start", descr="start the region")
class RegionStart(Command):
    def execute(self, actor, arguments, /):
        actor.tell("started")


@command("stop", descr="stop the region")
class RegionStop(Command):
    def execute(self, actor, arguments, /):
        actor.tell("stopped")


@command("status", descr="show the region status", permission="allow")
class RegionStatus(Command):
    def execute(self, actor, arguments, /):
        actor.tell("running")


@command("region", parent="zone", descr="manage regions")
class ZoneRegion(Command):
    def __init__(self):
        super().__init__()
        self.register_command(RegionStart)
        self.register_command(RegionStop)
        self.register_command(RegionStatus)


@command("zone", "z", descr="manage zones")
class Zone(Command):
    def __init__(self):
        super().__init__()
        self.register_command(ZoneCreate)
        self.register_command(ZoneDelete)
        self.register_command(ZoneRegion)


@command("warp", static=("destination",), descr="warp somewhere")
class Warp(Command):
    def execute(self, actor, arguments, /):
        actor.tell(f"warped to {arguments.get_string('destination')}")


def make_dispatcher(**options):
    """A dispatcher named "app" (uncolored) holding the zone tree."""
    dispatcher = Dispatcher(Settings(application="app", colorful=False, **options))
    dispatcher.register_command(Zone)
    return dispatcher
