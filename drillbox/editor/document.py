"""Text document stored as a chain of bounded chunks with undo and redo."""

from __future__ import annotations

import argparse
import dataclasses
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterator, Optional

DEFAULT_NODE_CAP = 10

Metadata = dict[str, bool]


class OperationType(str, Enum):
    ADD = "ADD"
    DELETE = "DELETE"
    REPLACE = "REPLACE"
    FORMAT = "FORMAT"


@dataclass
class Operation:
    """An edit; ``existing_text`` and ``existing_meta`` are filled in when applied."""

    type: OperationType
    position: int = 0
    length: int = 0
    data: str = ""
    metadata: Metadata = field(default_factory=dict)
    existing_text: str = ""
    existing_meta: list[Metadata] = field(default_factory=list)
    timestamp: Optional[datetime] = None


@dataclass(eq=False)
class TextNode:
    """One chunk of text holding at most ``cap`` characters."""

    content: str
    cap: int = DEFAULT_NODE_CAP
    metadata: Metadata = field(default_factory=dict)
    next: Optional[TextNode] = field(default=None, repr=False)
    prev: Optional[TextNode] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.cap <= 0:
            self.cap = DEFAULT_NODE_CAP

    def __len__(self) -> int:
        return len(self.content)


class Document:
    """Editable text with a linear undo/redo history."""

    def __init__(self) -> None:
        self._head: Optional[TextNode] = None
        self._tail: Optional[TextNode] = None
        self.history: list[Operation] = []
        self.current_version = -1

    # --- structure helpers -------------------------------------------------

    def nodes(self) -> Iterator[TextNode]:
        """Yield the chunks from first to last."""
        current = self._head
        while current is not None:
            yield current
            current = current.next

    def __len__(self) -> int:
        return sum(len(node) for node in self.nodes())

    def __str__(self) -> str:
        return "".join(node.content for node in self.nodes())

    def _find(self, pos: int) -> tuple[Optional[TextNode], int]:
        if self._head is None:
            return None, 0
        accum = 0
        for node in self.nodes():
            if accum <= pos < accum + len(node):
                return node, pos - accum
            accum += len(node)
        if pos == accum and self._tail is not None:
            return self._tail, len(self._tail)
        return None, 0

    def _link_after(self, anchor: TextNode, node: TextNode) -> None:
        node.next = anchor.next
        node.prev = anchor
        if anchor.next is not None:
            anchor.next.prev = node
        else:
            self._tail = node
        anchor.next = node

    def _insert_new_nodes(self, after: Optional[TextNode], data: str) -> None:
        for start in range(0, len(data), DEFAULT_NODE_CAP):
            node = TextNode(data[start:start + DEFAULT_NODE_CAP])
            if after is None:
                if self._head is None:
                    self._head = self._tail = node
                else:
                    node.next = self._head
                    self._head.prev = node
                    self._head = node
            else:
                self._link_after(after, node)
            after = node

    def _redistribute(self, node: TextNode, content: str) -> None:
        cap = node.cap
        node.content = content[:cap]
        current = node
        for start in range(cap, len(content), cap):
            extra = TextNode(content[start:start + cap], cap, dict(node.metadata))
            self._link_after(current, extra)
            current = extra

    def _remove_node(self, node: TextNode) -> None:
        if node.prev is not None:
            node.prev.next = node.next
        else:
            self._head = node.next
        if node.next is not None:
            node.next.prev = node.prev
        else:
            self._tail = node.prev

    def _split(self, node: TextNode, offset: int) -> None:
        if offset <= 0 or offset >= len(node):
            return
        rest = TextNode(node.content[offset:], node.cap, dict(node.metadata))
        node.content = node.content[:offset]
        self._link_after(node, rest)

    def _node_at(self, pos: int) -> Optional[tuple[TextNode, int]]:
        """Locate ``pos`` for range edits, stepping past a node's end; None at document end."""
        node, offset = self._find(pos)
        if node is None or (offset == len(node) and node.next is None):
            return None
        if offset == len(node):
            node, offset = node.next, 0
            if node is None:
                return None
        return node, offset

    # --- primitive edits ---------------------------------------------------

    def _apply_add(self, pos: int, data: str) -> None:
        if self._head is None:
            self._insert_new_nodes(None, data)
            return
        node, offset = self._find(pos)
        if node is None:
            self._insert_new_nodes(self._tail, data)
            return
        content = node.content[:offset] + data + node.content[offset:]
        if len(content) <= node.cap:
            node.content = content
        else:
            self._redistribute(node, content)

    def _apply_delete(self, pos: int, length: int) -> str:
        if self._head is None or length <= 0:
            return ""
        deleted: list[str] = []
        remaining = length
        while remaining > 0:
            located = self._node_at(pos)
            if located is None:
                break
            node, offset = located
            count = min(len(node) - offset, remaining)
            deleted.append(node.content[offset:offset + count])
            node.content = node.content[:offset] + node.content[offset + count:]
            if not node.content:
                self._remove_node(node)
            remaining -= count
        return "".join(deleted)

    def _isolate_range(self, pos: int, length: int) -> Iterator[TextNode]:
        """Split chunks so that the range is covered by whole nodes, yielding each."""
        if self._head is None:
            return
        remaining = length
        current = pos
        while remaining > 0:
            located = self._node_at(current)
            if located is None:
                break
            node, offset = located
            if offset > 0:
                self._split(node, offset)
                assert node.next is not None
                node = node.next
            size = len(node)
            if size > remaining:
                self._split(node, remaining)
                size = remaining
            yield node
            remaining -= size
            current += size

    def _apply_format(self, pos: int, length: int, meta: Metadata) -> list[Metadata]:
        if length <= 0:
            return []
        previous: list[Metadata] = []
        for node in self._isolate_range(pos, length):
            previous.append(dict(node.metadata))
            node.metadata.update(meta)
        return previous

    def _revert_format(self, pos: int, length: int, old: list[Metadata]) -> None:
        if not old or length <= 0:
            return
        saved = iter(old)
        for node in self._isolate_range(pos, length):
            node.metadata = dict(next(saved, {}))

    # --- history -----------------------------------------------------------

    def apply(self, operation: Operation) -> None:
        """Perform ``operation`` and record it, discarding any undone operations."""
        del self.history[self.current_version + 1:]
        op = dataclasses.replace(
            operation, metadata=dict(operation.metadata), existing_meta=[], timestamp=datetime.now()
        )

        current_len = len(self)
        if op.type in (OperationType.ADD, OperationType.REPLACE) and op.position > current_len:
            op.data = " " * (op.position - current_len) + op.data
            op.position = current_len

        if op.type == OperationType.ADD:
            self._apply_add(op.position, op.data)
        elif op.type == OperationType.DELETE:
            op.existing_text = self._apply_delete(op.position, op.length)
        elif op.type == OperationType.REPLACE:
            op.existing_text = self._apply_delete(op.position, op.length)
            self._apply_add(op.position, op.data)
        elif op.type == OperationType.FORMAT:
            op.existing_meta = self._apply_format(op.position, op.length, op.metadata)

        self.history.append(op)
        self.current_version += 1

    def undo(self) -> None:
        """Reverse the current operation; does nothing with no history."""
        if self.current_version < 0:
            return
        op = self.history[self.current_version]
        if op.type == OperationType.ADD:
            self._apply_delete(op.position, len(op.data))
        elif op.type == OperationType.DELETE:
            self._apply_add(op.position, op.existing_text)
        elif op.type == OperationType.REPLACE:
            self._apply_delete(op.position, len(op.data))
            self._apply_add(op.position, op.existing_text)
        elif op.type == OperationType.FORMAT:
            self._revert_format(op.position, op.length, op.existing_meta)
        self.current_version -= 1

    def redo(self) -> None:
        """Re-apply the next undone operation, if any."""
        if self.current_version >= len(self.history) - 1:
            return
        self.current_version += 1
        op = self.history[self.current_version]
        if op.type == OperationType.ADD:
            self._apply_add(op.position, op.data)
        elif op.type == OperationType.DELETE:
            self._apply_delete(op.position, op.length)
        elif op.type == OperationType.REPLACE:
            self._apply_delete(op.position, op.length)
            self._apply_add(op.position, op.data)
        elif op.type == OperationType.FORMAT:
            self._apply_format(op.position, op.length, op.metadata)

    def status(self) -> str:
        """Describe the text and each chunk's content, size and formatting."""
        lines = [f'Document: "{self}"', "Nodes:"]
        for index, node in enumerate(self.nodes()):
            meta = " ".join(sorted(key for key, on in node.metadata.items() if on))
            lines.append(
                f'  [{index}] "{node.content}" (len={len(node)}, cap={node.cap}, meta={meta})'
            )
        return "\n".join(lines)


_HELP = """
  insert  — insert text at a position
  delete  — delete N characters at a position
  replace — replace N characters at a position with new text
  format  — apply bold/italic formatting to a range
  undo    — undo the last operation
  redo    — redo the last undone operation
  status  — show document content and node structure
  exit    — quit"""


def _read_line(prompt: str) -> str:
    print(prompt, end="", flush=True)
    return sys.stdin.readline().rstrip("\r\n")


def _read_int(prompt: str) -> int:
    value = _read_line(prompt)
    try:
        return int(value)
    except ValueError:
        print(f'  Invalid number "{value}", using 0.')
        return 0


def _yes(answer: str) -> bool:
    return answer in ("y", "yes")


def main(argv: Optional[list[str]] = None) -> int:
    argparse.ArgumentParser(description="Interactive document editor.").parse_args(argv)
    doc = Document()
    print("doc-tool — Interactive Document Editor")
    print("Commands: insert, delete, replace, format, undo, redo, status, help, exit")

    while True:
        print("\ndoc-tool> ", end="", flush=True)
        line = sys.stdin.readline()
        if not line:
            break
        cmd = line.strip()
        if not cmd:
            continue

        if cmd == "insert":
            pos = _read_int("  Position: ")
            text = _read_line("  Text: ")
            doc.apply(Operation(OperationType.ADD, position=pos, data=text))
            print(doc.status())
        elif cmd == "delete":
            pos = _read_int("  Position: ")
            length = _read_int("  Length: ")
            doc.apply(Operation(OperationType.DELETE, position=pos, length=length))
            print(doc.status())
        elif cmd == "replace":
            pos = _read_int("  Position: ")
            length = _read_int("  Length: ")
            text = _read_line("  New text: ")
            doc.apply(Operation(OperationType.REPLACE, position=pos, length=length, data=text))
            print(doc.status())
        elif cmd == "format":
            pos = _read_int("  Position: ")
            length = _read_int("  Length: ")
            bold = _read_line("  Bold? (y/n): ")
            italic = _read_line("  Italic? (y/n): ")
            meta: Metadata = {}
            if _yes(bold):
                meta["bold"] = True
            if _yes(italic):
                meta["italic"] = True
            doc.apply(Operation(OperationType.FORMAT, position=pos, length=length, metadata=meta))
            print(doc.status())
        elif cmd == "undo":
            doc.undo()
            print(doc.status())
        elif cmd == "redo":
            doc.redo()
            print(doc.status())
        elif cmd == "status":
            print(doc.status())
        elif cmd == "help":
            print(_HELP)
        elif cmd in ("exit", "quit"):
            print("Goodbye!")
            return 0
        else:
            print(f"  Unknown command \"{cmd}\". Type 'help' to see available commands.")
    return 0