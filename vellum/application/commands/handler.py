from typing import TYPE_CHECKING, Any, ClassVar

from ...domain import Command
from ...routing import COMMAND, build_router, collect_routes, raise_unhandled

if TYPE_CHECKING:
    from ...routing import MessageRouter
    from ..repository import Repository


class CommandHandler:
    """Base class for message handlers that work on aggregates.

    Methods decorated with ``@handles_command`` are routed by the type of
    their command parameter. Each receives the command and the repository
    of the unit of work opened for it. Handlers load aggregates with
    ``repository.get``, register new ones with ``repository.add`` and call
    business methods on them; they never store or publish anything
    themselves. Handler methods may be plain functions or coroutines.

    Examples:
        >>> class GreeterHandler(CommandHandler):
        ...     @handles_command
        ...     async def create(self, cmd: CreateGreeter, repository: Repository) -> ULID:
        ...         greeter = Greeter()
        ...         repository.add(greeter)
        ...         return greeter.id
        ...
        ...     @handles_command
        ...     async def greet(self, cmd: GreetPerson, repository: Repository) -> None:
        ...         greeter = await repository.get(Greeter, cmd.target)
        ...         greeter.greet_person(cmd.name)
    """

    _command_router: ClassVar["MessageRouter"]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._command_router = build_router(cls, COMMAND, raise_unhandled("handler"))

    def handle(self, command: Command, repository: "Repository") -> Any:
        """Route ``command`` to its handler method.

        Raises:
            NotImplementedError: If no handler is registered for this command type.
        """
        return self._command_router.route(self, command, repository)

    @classmethod
    def handled_command_types(cls) -> list[type[Command]]:
        return list(collect_routes(cls, COMMAND))
