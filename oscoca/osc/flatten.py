"""
Bundle flattening.

Bundles nest to any depth chosen by the sender, so flattening walks the
packet tree with an explicit stack of element iterators instead of native
recursion.
"""

from __future__ import annotations

from collections.abc import Iterator

from oscoca.osc.packet import OscBundle, OscMessage, OscPacket


def flatten_packet(packet: OscPacket) -> Iterator[OscMessage]:
    """
    Expand a packet into its messages in document order.

    A message yields itself. A bundle yields the flattening of each of its
    elements in listed order. The sequence is lazy.

    Args:
        packet: Message or bundle to flatten.

    Yields:
        Each contained OscMessage, depth first, in order.

    Example:
        >>> inner = OscBundle(elements=(msg_b, msg_c))
        >>> list(flatten_packet(OscBundle(elements=(msg_a, inner))))
        [msg_a, msg_b, msg_c]
    """
    if isinstance(packet, OscMessage):
        yield packet
        return

    stack: list[Iterator[OscPacket]] = [iter(packet.elements)]
    while stack:
        element = next(stack[-1], None)
        if element is None:
            stack.pop()
        elif isinstance(element, OscBundle):
            stack.append(iter(element.elements))
        else:
            yield element


def count_messages(packet: OscPacket) -> int:
    """Count the messages a packet flattens to."""
    return sum(1 for _ in flatten_packet(packet))
