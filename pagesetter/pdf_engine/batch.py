"""
Batch rendering - independent documents on a thread pool.

Each job gets its own PdfGenerator, surface and RenderState; nothing
mutable is shared between jobs. Layout inside one document stays a
single sequential pass.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from config.settings import Settings, get_settings
from pagesetter.document.models import DocumentElement
from pagesetter.exceptions import PagesetterError

from .renderer import PdfGenerator


logger = logging.getLogger(__name__)

Job = Tuple[Sequence[DocumentElement], Union[str, Path]]


class BatchStatus(Enum):
    """Outcome of one batch job"""
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BatchResult:
    """Per-document outcome"""
    index: int
    output_path: Path
    status: BatchStatus
    pages: int = 0
    estimated_pages: int = 0
    elapsed: float = 0.0
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == BatchStatus.COMPLETED


def _render_one(index: int, elements: Sequence[DocumentElement], output_path: Union[str, Path],
                settings: Settings) -> BatchResult:
    started = time.monotonic()
    output = Path(output_path)
    try:
        state = PdfGenerator(settings).generate(elements, output)
    except PagesetterError as e:
        logger.error(f"Batch job {index} failed ({output}): {e}")
        return BatchResult(index, output, BatchStatus.FAILED,
                           elapsed=time.monotonic() - started, error=str(e))
    except Exception as e:
        logger.exception(f"Batch job {index} crashed ({output})")
        return BatchResult(index, output, BatchStatus.FAILED,
                           elapsed=time.monotonic() - started, error=f"{type(e).__name__}: {e}")

    return BatchResult(
        index,
        output,
        BatchStatus.COMPLETED,
        pages=state.page_info.current_page,
        estimated_pages=state.page_info.total_pages,
        elapsed=time.monotonic() - started,
    )


def render_batch(
    jobs: Iterable[Job],
    settings: Optional[Settings] = None,
    max_workers: Optional[int] = None,
) -> List[BatchResult]:
    """
    Render several documents concurrently.

    Args:
        jobs: (elements, output_path) pairs
        settings: Shared read-only settings (process-wide settings if omitted)
        max_workers: Thread count (settings.max_workers if omitted)

    Returns:
        One BatchResult per job, in job order. Library errors are reported
        per job; anything else propagates.
    """
    settings = settings or get_settings()
    jobs = list(jobs)
    workers = max_workers or settings.max_workers
    results: List[Optional[BatchResult]] = [None] * len(jobs)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(_render_one, i, elements, path, settings): i
            for i, (elements, path) in enumerate(jobs)
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    completed = sum(1 for r in results if r.success)
    logger.info(f"Batch finished: {completed}/{len(jobs)} documents rendered")
    return results
