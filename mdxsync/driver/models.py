from pydantic import BaseModel


class JobFailure(BaseModel):
    source_url: str
    output_path: str
    error: str


class IngestReport(BaseModel):
    succeeded: int = 0
    failed: list[JobFailure] = []
    written: list[str] = []
    gitignore_updated: bool = False
    duration: float = 0.0

    @property
    def total(self) -> int:
        return self.succeeded + len(self.failed)
