from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from answerlens.database.models import AnalysisRecord
from answerlens.validation.models import UploadedFile


@dataclass(slots=True)
class PipelineContext:
    record: AnalysisRecord
    file: UploadedFile
    page_images: list[bytes] = field(default_factory=list)
    chunks: list[str] = field(default_factory=list)


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
