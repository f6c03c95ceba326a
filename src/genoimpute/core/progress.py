"""Progress bar utility for per-locus loops."""

import sys
from collections.abc import Iterable, Iterator

import progressbar


def progress_iterator(
    iterable: Iterable, total: int, desc: str = "", enabled: bool = True
) -> Iterator:
    """Wrap an iterable with a progressbar2 display on stdout.

    The bar is finalized in a try/finally block so that early breaks or
    exceptions from the caller don't leave terminal output corrupted.

    Args:
        iterable: Items to iterate over.
        total: Total number of items.
        desc: Optional description prefix.
        enabled: If False, items are yielded without drawing a bar.

    Yields:
        Items from the wrapped iterable.
    """
    if not enabled:
        yield from iterable
        return

    widgets = [
        f"{desc}: " if desc else "",
        progressbar.Counter(),
        f"/{total} ",
        progressbar.Percentage(),
        " ",
        progressbar.Bar(),
        " ",
        progressbar.ETA(),
    ]
    bar = progressbar.ProgressBar(max_value=total, widgets=widgets, fd=sys.stdout)
    bar.start()
    try:
        for i, item in enumerate(iterable):
            yield item
            bar.update(i + 1)
    finally:
        bar.finish()
