"""Comment toggling over whole-line text spans."""

from __future__ import annotations

from fold_engine.syntax.languages import CommentStyle


def toggle_comment(block: str, style: CommentStyle) -> str:
    if style.block is not None:
        return toggle_block_comment(block, *style.block)
    return toggle_line_comment(block, style.line or "//")


def toggle_line_comment(block: str, prefix: str) -> str:
    """Prefix every non-blank line, or strip the prefix if all carry it."""

    lines = block.split("\n")
    content = [line for line in lines if line.strip()]
    if not content:
        return block
    if all(line.lstrip().startswith(prefix) for line in content):
        return "\n".join(
            _uncomment_line(line, prefix) if line.strip() else line for line in lines
        )
    indent = min(_indent_width(line) for line in content)
    return "\n".join(
        f"{line[:indent]}{prefix} {line[indent:]}" if line.strip() else line
        for line in lines
    )


def toggle_block_comment(block: str, opener: str, closer: str) -> str:
    """Wrap the whole span in ``opener``/``closer`` or unwrap it."""

    stripped = block.strip()
    if not stripped:
        return block
    lead = block[: len(block) - len(block.lstrip())]
    trail = block[len(block.rstrip()) :]
    if (
        stripped.startswith(opener)
        and stripped.endswith(closer)
        and len(stripped) >= len(opener) + len(closer)
    ):
        inner = stripped[len(opener) : len(stripped) - len(closer)]
        if inner.startswith(" "):
            inner = inner[1:]
        if inner.endswith(" "):
            inner = inner[:-1]
        return f"{lead}{inner}{trail}"
    return f"{lead}{opener} {stripped} {closer}{trail}"


def _uncomment_line(line: str, prefix: str) -> str:
    indent = _indent_width(line)
    rest = line[indent + len(prefix) :]
    if rest.startswith(" "):
        rest = rest[1:]
    return line[:indent] + rest


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


__all__ = ["toggle_block_comment", "toggle_comment", "toggle_line_comment"]
