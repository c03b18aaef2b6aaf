"""
In-memory OCA device.

The device owns the object tree and executes commands against it. Objects
are numbered on registration: the root block gets the well-known ONo 100,
everything else is allocated upward from the first non-reserved number.

Example:
    >>> device = OcaDevice()
    >>> block = await device.add(OcaBlock("Mixer"))
    >>> gain = await device.add(OcaGain("Gain"), container=block)
    >>> results = await device.find_action_objects_by_role_path(
    ...     ("Mixer", "Gain"), OcaObjectSearchResultFlags.ONO
    ... )
    >>> results[0].ono == gain.object_number
    True
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, TypeVar

from oscoca.exceptions import Ocp1Error
from oscoca.ocp1.constants import OcaObjectSearchResultFlags, OcaStatus, Ocp1Constants
from oscoca.ocp1.models import OcaObjectSearchResult, Ocp1Command, Ocp1Response
from oscoca.device.objects import OcaBlock, OcaRoot

if TYPE_CHECKING:
    from oscoca.device.controller import OcaController

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=OcaRoot)

ROOT_BLOCK_ROLE = "Root"


class OcaDevice:
    """
    Object tree plus command executor.

    Commands are executed one at a time; concurrent callers queue on an
    internal lock.

    Attributes:
        root_block: Top of the object tree. Its role is not part of any
            role path.
    """

    def __init__(self) -> None:
        self._objects: dict[int, OcaRoot] = {}
        self._next_ono = Ocp1Constants.MAX_RESERVED_ONO + 1
        self._lock = asyncio.Lock()

        self.root_block = OcaBlock(ROOT_BLOCK_ROLE)
        self.register(self.root_block, object_number=Ocp1Constants.ROOT_BLOCK_ONO)

    def register(self, obj: OcaRoot, object_number: int | None = None) -> int:
        """
        Assign an object number and make the object addressable.

        Registration does not place the object in the tree; see add().

        Args:
            obj: Object to register.
            object_number: Explicit ONo, or None to allocate the next free one.

        Returns:
            The object number.

        Raises:
            Ocp1Error: With PARAMETER_ERROR if the object is already
                registered or the ONo is taken.
        """
        if obj.object_number is not None:
            raise Ocp1Error(OcaStatus.PARAMETER_ERROR, f"{obj!r} is already registered")

        if object_number is None:
            while self._next_ono in self._objects:
                self._next_ono += 1
            object_number = self._next_ono
            self._next_ono += 1
        elif object_number in self._objects:
            raise Ocp1Error(OcaStatus.PARAMETER_ERROR, f"ONo {object_number} already in use")

        obj.object_number = object_number
        self._objects[object_number] = obj
        logger.debug("Registered %r", obj)
        return object_number

    def deregister(self, obj: OcaRoot) -> None:
        """Remove an object (and its container link) from the device."""
        if obj.object_number is None or self._objects.get(obj.object_number) is not obj:
            raise Ocp1Error(OcaStatus.BAD_ONO, f"{obj!r} is not registered")
        if obj.container is not None:
            obj.container.remove_member(obj)
        del self._objects[obj.object_number]
        obj.object_number = None

    async def add(self, obj: T, container: OcaBlock | None = None) -> T:
        """
        Register an object and place it in a block.

        Args:
            obj: Object to add.
            container: Block to add it to. Defaults to the root block.

        Returns:
            The object, now numbered.
        """
        block = container if container is not None else self.root_block
        async with self._lock:
            if obj.object_number is None:
                self.register(obj)
            block.add_member(obj)
        return obj

    def resolve_object(self, object_number: int) -> OcaRoot | None:
        """Get the object with an object number, or None."""
        return self._objects.get(object_number)

    @property
    def objects(self) -> Sequence[OcaRoot]:
        """Get all registered objects."""
        return tuple(self._objects.values())

    async def find_action_objects_by_role_path(
        self,
        role_path: Sequence[str],
        result_flags: OcaObjectSearchResultFlags,
    ) -> list[OcaObjectSearchResult]:
        """
        Find objects by role path below the root block.

        Matches are returned in depth-first pre-order, visiting members in
        block order. Only the fields selected by result_flags are filled in.

        Args:
            role_path: Role names from the root block down to the object.
            result_flags: Which result fields to populate.

        Returns:
            Matching objects, possibly empty.
        """
        role_path = tuple(role_path)
        if not role_path:
            return []
        return [_search_result(obj, result_flags) for obj in self._walk_role_path(role_path)]

    def _walk_role_path(self, role_path: tuple[str, ...]) -> Iterator[OcaRoot]:
        depth_limit = len(role_path)
        stack: list[tuple[Iterator[OcaRoot], int]] = [(iter(self.root_block.members), 0)]
        while stack:
            members, depth = stack[-1]
            member = next(members, None)
            if member is None:
                stack.pop()
                continue
            if member.role != role_path[depth]:
                continue
            if depth + 1 == depth_limit:
                yield member
            elif isinstance(member, OcaBlock):
                stack.append((iter(member.members), depth + 1))

    async def handle_command(
        self,
        command: Ocp1Command,
        controller: OcaController | None = None,
    ) -> Ocp1Response:
        """
        Execute a command.

        Args:
            command: Command to execute.
            controller: Controller on whose behalf it runs.

        Returns:
            Response. Unknown targets give BAD_ONO, unknown methods
            NOT_IMPLEMENTED.
        """
        obj = self._objects.get(command.target_ono)
        if obj is None:
            return Ocp1Response(handle=command.handle, status_code=OcaStatus.BAD_ONO)

        async with self._lock:
            return await obj.handle_command(command, controller)

    def __repr__(self) -> str:
        return f"OcaDevice(objects={len(self._objects)})"


def _search_result(obj: OcaRoot, flags: OcaObjectSearchResultFlags) -> OcaObjectSearchResult:
    return OcaObjectSearchResult(
        ono=obj.object_number if flags & OcaObjectSearchResultFlags.ONO else None,
        class_identification=(
            obj.CLASS_ID if flags & OcaObjectSearchResultFlags.CLASS_IDENTIFICATION else None
        ),
        container_path=(
            obj.container_path if flags & OcaObjectSearchResultFlags.CONTAINER_PATH else None
        ),
        role=obj.role if flags & OcaObjectSearchResultFlags.ROLE else None,
        label=obj.label if flags & OcaObjectSearchResultFlags.LABEL else None,
    )
