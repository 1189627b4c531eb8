from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from docsync.exceptions import InvalidBoundsError
from docsync.services.chunker import TextChunker


class ChunkRequest(BaseModel):
    text: str
    delimiter: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    include_text: bool = False


def create_chunks_router(chunker: TextChunker):
    router = APIRouter(prefix="/chunks", tags=["Chunks"])

    @router.post("")
    def chunk_text(req: ChunkRequest):
        try:
            active = chunker.with_overrides(req.delimiter, req.min_length, req.max_length)
        except InvalidBoundsError as e:
            raise HTTPException(status_code=422, detail=str(e))
        segments = active.chunk(req.text)
        result = []
        for s in segments:
            item = {"start": s.start, "end": s.end, "length": s.length, "delimited": s.delimited}
            if req.include_text:
                item["text"] = s.slice(req.text)
            result.append(item)
        return {"segments": result}

    return router
