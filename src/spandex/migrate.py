"""Top-level migration sequence: load source, merge, write destination.

Every step runs in order on the calling thread. Errors from any step
propagate unchanged; snippets already written by a failed ``write()``
stay on disk.
"""

from __future__ import annotations

import logging

from .expander.merger import merge, merge_all
from .expander.models import Group
from .expander.registry import ExpanderRegistry

logger = logging.getLogger(__name__)


def default_import_name(source: str) -> str:
    return f"Imported from {source}"


def run_migration(
    registry: ExpanderRegistry,
    source: str,
    destination: str,
    import_name: str | None = None,
    dry_run: bool = False,
) -> Group:
    """Copy every group of *source* under one import group in *destination*.

    Args:
        registry: Registry used to construct both backends.
        source: Registered name of the backend to read from.
        destination: Registered name of the backend to write to.
        import_name: Name of the top-level group receiving the imported
            groups; defaults to ``"Imported from <source>"``.
        dry_run: If ``True``, stop before writing the destination.

    Returns:
        The import group as handed to the destination.

    Raises:
        NotFoundError: If either backend name is unknown.
        ExpanderError, OSError: From loading or writing a backend.
    """
    name = import_name or default_import_name(source)

    src = registry.lookup(source)
    src.load()

    root = Group(name)
    groups = src.groups()
    for group in groups:
        group.parent = root
    merge_all(root, groups)

    dst = registry.lookup(destination)
    existing = dst.group(name)
    if existing is not None:
        logger.info("Merging into existing group %s", existing)
        root = merge(existing, root)
    dst.set_group(root)

    logger.info(
        "Importing %d groups, %d snippets from %s into %s/%s",
        len(root.groups),
        root.count_snippets(),
        source,
        destination,
        root.name,
    )
    if dry_run:
        logger.info("Dry run, not writing %s", destination)
        return root

    dst.write()
    logger.info("Migration complete")
    return root
