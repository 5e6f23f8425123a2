"""
openlib-spine - import Open Library author dumps into a searchable record store.

Pipeline: LineSource -> parse_line -> normalize_record -> BatchSubmitter -> RecordStore
"""

__version__ = "0.1.0"

from openlib_spine.domain.models import AuthorRecord, DumpLine  # noqa: E402
from openlib_spine.pipelines.author_import import AuthorImportPipeline  # noqa: E402
from openlib_spine.sources.lines import LineSource  # noqa: E402
from openlib_spine.store.memory import InMemoryRecordStore  # noqa: E402
from openlib_spine.store.sqlite import SQLiteRecordStore  # noqa: E402

__all__ = [
    "__version__",
    "AuthorRecord",
    "DumpLine",
    "AuthorImportPipeline",
    "LineSource",
    "InMemoryRecordStore",
    "SQLiteRecordStore",
]
