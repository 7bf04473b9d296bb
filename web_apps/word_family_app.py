#!/usr/bin/env python3
"""
FastAPI Word Family Application
Vocabulary search, word family resolution, batch population and statistics
"""

from fastapi import FastAPI, HTTPException, Query, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict
import logging

from word_families.aggregator import FamilyStatsService
from word_families.config import configure_logging
from word_families.exceptions import (
    InvalidWordError,
    PopulationAbortedError,
    RecordStoreError,
    ResolutionUnavailableError,
)
from word_families.family_resolver import FamilyResolver
from word_families.importer import import_rows
from word_families.normalizer import Normalizer, default_normalizer
from word_families.population import populate_family_labels
from word_families.record_store import PostgresWordRecordStore, WordRecordStore
from word_families.search import search_vocabulary
from word_families.vocabulary_index import PostgresVocabularyIndex, VocabularyIndex

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Word Family Explorer", description="Resolve words to their word families")


# ---------------------------------------------------------------------------
# Request bodies


class TokenizeRequest(BaseModel):
    text: str = ""


class ImportRequest(BaseModel):
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class MappingRequest(BaseModel):
    word: Optional[str] = None
    headword: Optional[str] = None


class BatchMappingRequest(BaseModel):
    words: Optional[List[str]] = None
    headword: Optional[str] = None


# ---------------------------------------------------------------------------
# Dependencies (overridden in tests)

_vocabulary_index: Optional[PostgresVocabularyIndex] = None
_record_store: Optional[PostgresWordRecordStore] = None
_stats_service: Optional[FamilyStatsService] = None


def get_normalizer() -> Normalizer:
    return default_normalizer


def get_vocabulary_index() -> VocabularyIndex:
    global _vocabulary_index
    if _vocabulary_index is None:
        _vocabulary_index = PostgresVocabularyIndex()
    return _vocabulary_index


def get_record_store() -> WordRecordStore:
    global _record_store
    if _record_store is None:
        _record_store = PostgresWordRecordStore()
    return _record_store


def get_stats_service(store: WordRecordStore = Depends(get_record_store)) -> FamilyStatsService:
    global _stats_service
    if _stats_service is None:
        _stats_service = FamilyStatsService(store)
    return _stats_service


# ---------------------------------------------------------------------------
# Error mapping


@app.exception_handler(InvalidWordError)
async def invalid_word_handler(request: Request, exc: InvalidWordError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(ResolutionUnavailableError)
async def unavailable_handler(request: Request, exc: ResolutionUnavailableError):
    logger.error(f"Vocabulary unavailable for {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "Vocabulary index unavailable"})


@app.exception_handler(RecordStoreError)
async def record_store_handler(request: Request, exc: RecordStoreError):
    logger.error(f"Record store error for {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Database error"})


def _records_payload(records) -> List[Dict[str, Any]]:
    return [record.to_dict() for record in records]


# ---------------------------------------------------------------------------
# Vocabulary lookups


@app.get("/api/vocabulary/search")
def vocabulary_search(
    word: Optional[str] = Query(None, description="Word to look up"),
    type: str = Query("forward", description="forward or reverse"),
    index: VocabularyIndex = Depends(get_vocabulary_index),
):
    """Headword -> derivatives, or derivative -> headwords"""
    result = search_vocabulary(index, word, type)
    if result is None:
        detail = "Headword not found" if type == "forward" else "No headword found for this derivative"
        return JSONResponse(status_code=404, content={"error": detail, "word": word.strip().lower()})
    return result


@app.get("/api/resolve")
def resolve_word(
    word: str = Query(..., description="Token to resolve"),
    index: VocabularyIndex = Depends(get_vocabulary_index),
):
    """Family label for a single token"""
    if not word.strip():
        raise HTTPException(status_code=400, detail="Word parameter is required")
    family = FamilyResolver(index).resolve(word)
    if family is None:
        return JSONResponse(status_code=404, content={"error": "Word family not found", "word": word})
    return {"word": word, "family": family}


@app.post("/api/tokenize")
def tokenize(body: TokenizeRequest, normalizer: Normalizer = Depends(get_normalizer)):
    return {"tokens": normalizer.normalize(body.text)}


# ---------------------------------------------------------------------------
# Import and population


@app.post("/api/import")
def import_records(
    body: ImportRequest,
    store: WordRecordStore = Depends(get_record_store),
    normalizer: Normalizer = Depends(get_normalizer),
):
    summary = import_rows(body.rows, store, normalizer)
    return {
        "success": True,
        "message": f"Imported {summary.inserted} records",
        **summary.to_dict(),
    }


@app.post("/api/populate-headwords")
def populate_headwords(
    store: WordRecordStore = Depends(get_record_store),
    index: VocabularyIndex = Depends(get_vocabulary_index),
):
    """Resolve every record that has no word family yet"""
    resolver = FamilyResolver(index.snapshot())
    try:
        summary = populate_family_labels(store, resolver)
    except PopulationAbortedError as exc:
        partial = exc.summary.to_dict() if exc.summary else {}
        return JSONResponse(
            status_code=503,
            content={"error": "Failed to populate head words", "details": str(exc), **partial},
        )

    return {
        "success": True,
        "message": f"Populated {summary.updated} word families ({summary.not_found} not found)",
        **summary.to_dict(),
    }


# ---------------------------------------------------------------------------
# Statistics


@app.get("/api/stats/families")
def family_stats(
    family: Optional[str] = Query(None, description="Stored family label to drill into"),
    stats: FamilyStatsService = Depends(get_stats_service),
):
    if family:
        return _records_payload(stats.get_family_by_label(family))
    return [entry.to_dict() for entry in stats.family_stats()]


@app.get("/api/stats/families/{headword}")
def family_records(headword: str, stats: FamilyStatsService = Depends(get_stats_service)):
    records = stats.get_family(headword)
    if not records:
        raise HTTPException(status_code=404, detail="Word family not found")
    return _records_payload(records)


@app.post("/api/stats/reload")
def reload_stats(stats: FamilyStatsService = Depends(get_stats_service)):
    stats.reload()
    return {"success": True}


@app.get("/api/stats/words")
def word_stats(
    word: Optional[str] = Query(None, description="Word to drill into"),
    stats: FamilyStatsService = Depends(get_stats_service),
):
    if word:
        return _records_payload(stats.get_word_records(word))
    return [{"word": item.word, "count": item.count} for item in stats.word_stats()]


@app.get("/api/stats/words-by-grade")
def words_by_grade(stats: FamilyStatsService = Depends(get_stats_service)):
    return [{"grade": item.grade, "uniqueWords": item.unique_words} for item in stats.grade_stats()]


# ---------------------------------------------------------------------------
# Family mappings


@app.get("/api/word-families")
def list_mappings(store: WordRecordStore = Depends(get_record_store)):
    return [{"word": m.word, "headword": m.headword} for m in store.fetch_mappings()]


@app.put("/api/word-families")
def update_mapping(body: MappingRequest, store: WordRecordStore = Depends(get_record_store)):
    """Change the headword a word is grouped under"""
    if not body.word or not body.headword:
        raise HTTPException(status_code=400, detail="word and headword are required")
    store.upsert_mapping(body.word, body.headword)
    return {"success": True}


@app.post("/api/word-families")
def batch_update_mappings(body: BatchMappingRequest, store: WordRecordStore = Depends(get_record_store)):
    if body.words is None or not body.headword:
        raise HTTPException(status_code=400, detail="words (array) and headword are required")
    for word in body.words:
        store.upsert_mapping(word, body.headword)
    return {"success": True, "updated": len(body.words)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
