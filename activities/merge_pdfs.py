"""
Merge PDFs activity: concatenate the pages of several documents.
"""

from dataclasses import dataclass
from typing import List, Optional

from . import register_activity
from .base import ActivityResult

from errors import MissingRequiredInput, MissingSources
from utilities import Print, format_bytes


@dataclass
class MergePdfsInputs:
    sources: Optional[List[bytes]] = None


@register_activity("merge_pdfs")
class MergePdfsFactory:
    """Factory for creating MergePdfs activity instances."""

    @staticmethod
    def create(engine, config: dict) -> "MergePdfs":
        return MergePdfs(engine, config)


class MergePdfs:
    """
    Merges multiple PDF documents into a single PDF document.

    Pages are appended source by source, each source's pages in their
    original order. An empty source list yields a document with no pages.
    """

    inputs_type = MergePdfsInputs

    def __init__(self, engine, config: dict):
        self.engine = engine

    def execute(self, inputs: MergePdfsInputs) -> ActivityResult:
        sources = inputs.sources
        if sources is None:
            raise MissingSources()
        for index, source in enumerate(sources):
            if not source:
                raise MissingRequiredInput(f"sources[{index}]")

        merged = self.engine.create()

        # Copied pages reference their source until the merged document is saved
        opened = []
        total_pages = 0
        for index, source in enumerate(sources):
            doc = self.engine.load(source)
            opened.append(doc)
            copied = self.engine.copy_pages(merged, doc)
            total_pages += copied
            Print("DEBUG", f"Source {index + 1}/{len(sources)}: {copied} page{'s' if copied != 1 else ''}")

        data = self.engine.save(merged)

        for doc in opened:
            doc.close()

        Print("SUCCESS", f"Merged {len(sources)} documents into {total_pages} pages ({format_bytes(len(data))})")
        return ActivityResult(result=data)

    @property
    def name(self) -> str:
        return "merge_pdfs"
