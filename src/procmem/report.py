"""
Plain-text tables for samples and chunk aggregations.

Rows are sorted largest first; the Total row always comes last.
"""

from typing import Iterable, List, Optional, Tuple

from .memory.aggregator import ChunkAggregator
from .models.sample import TOTAL_KEY, MemorySample

_ROW_TEMPLATE = "{size:>14}  {kib:>12}  {path}"


def _format_rows(rows: Iterable[Tuple[str, int]], total: int, top: Optional[int]) -> List[str]:
    rows = list(rows)
    hidden = 0
    if top is not None and len(rows) > top:
        hidden = len(rows) - top
        rows = rows[:top]

    lines = [_ROW_TEMPLATE.format(size="Bytes", kib="KiB", path="Mapping")]
    for path, size in rows:
        lines.append(_ROW_TEMPLATE.format(size=size, kib=f"{size / 1024:.1f}", path=path))
    if hidden:
        lines.append(f"... {hidden} more mappings")
    lines.append("-" * 40)
    lines.append(_ROW_TEMPLATE.format(size=total, kib=f"{total / 1024:.1f}", path=TOTAL_KEY))
    return lines


def format_sample_table(sample: MemorySample, top: Optional[int] = None) -> str:
    """
    Render a sample as a table.

    Args:
        sample: The sample to render.
        top: Show only the `top` largest mappings (Total still covers all).
    """
    header = f"Sample taken at {sample.sample_time.isoformat()}"
    if sample.pid is not None:
        header += f" for pid {sample.pid}"
    lines = [header]
    lines.extend(_format_rows(sample.sorted_by_size(), sample.total, top))
    if sample.indeterminate_regions:
        lines.append(
            f"{sample.indeterminate_regions} readable regions with overflowed addresses not counted"
        )
    return "\n".join(lines)


def format_aggregation_table(aggregator: ChunkAggregator, top: Optional[int] = None) -> str:
    """Render the bytes read per backing object, with chunk counts."""
    objects = sorted(
        aggregator.objects.values(), key=lambda obj: (-obj.total_size, obj.path)
    )
    rows = [
        (f"{obj.path} ({len(obj.chunks)} chunks)", obj.total_size) for obj in objects
    ]
    lines = _format_rows(rows, aggregator.total_size, top)
    if aggregator.skipped_regions:
        lines.append(f"{len(aggregator.skipped_regions)} readable regions skipped")
    return "\n".join(lines)
