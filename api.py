#!/usr/bin/env python3
"""
Item Text Parser - FastAPI Backend

Provides REST API endpoints so overlay and automation tools can send
copied item text and get the decoded item back.
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from item_parser import get_item_parser
from models import Item, ItemMod
from parse_errors import ItemParseError
from roll_check import RollConfig, RollTarget, check_roll

logger = logging.getLogger(__name__)

API_VERSION = '0.1.0'

# Clipboard copies of a single item are a few kilobytes at most
MAX_ITEM_TEXT_LENGTH = 20000


app = FastAPI(
    title="Item Text Parser",
    description="Decode copied item text into name, stats and mods",
    version=API_VERSION,
)


# =============================================================================
# Pydantic Models for API
# =============================================================================

class StatusResponse(BaseModel):
    status: str
    version: str


class ParseRequest(BaseModel):
    text: str


class ItemModResponse(BaseModel):
    affix_type: str
    name: Optional[str] = None
    tier: Optional[int] = None
    value: Optional[str] = None  # decimals as strings to keep exact digits
    roll_range: Optional[List[str]] = None
    tags: List[str] = []
    mod_qualifiers: str = ""


class StatLineResponse(BaseModel):
    name: str
    value: str


class ItemNameResponse(BaseModel):
    rarity: str
    name: str = ""
    prefix: str = ""
    suffix: str = ""
    display: str


class ItemResponse(BaseModel):
    item_class: str
    rarity: str
    category: str
    base_name: str
    display_name: str
    item_name: ItemNameResponse
    ilvl: int
    sockets: str
    stats: List[StatLineResponse]
    mods: List[ItemModResponse]


class RollTargetModel(BaseModel):
    name: str
    is_prefix: bool


class RollConfigModel(BaseModel):
    item_name: str
    mods: List[RollTargetModel] = []
    auto_aug_regal: bool = False


class CheckRollRequest(BaseModel):
    text: str
    config: RollConfigModel


class RollResultResponse(BaseModel):
    has_prefix: bool
    has_suffix: bool
    has_mod: bool
    needs_prefix: bool
    needs_suffix: bool


# =============================================================================
# Conversion Helpers
# =============================================================================

def mod_to_response(mod: ItemMod) -> ItemModResponse:
    roll_range = None
    if mod.roll_range is not None:
        roll_range = [str(mod.roll_range[0]), str(mod.roll_range[1])]
    return ItemModResponse(
        affix_type=mod.affix_type.value,
        name=mod.name,
        tier=mod.tier,
        value=str(mod.value) if mod.value is not None else None,
        roll_range=roll_range,
        tags=list(mod.tags),
        mod_qualifiers=mod.mod_qualifiers,
    )


def item_to_response(item: Item) -> ItemResponse:
    return ItemResponse(
        item_class=item.item_class,
        rarity=item.rarity.value,
        category=item.category.value,
        base_name=item.base_name,
        display_name=item.display_name,
        item_name=ItemNameResponse(
            rarity=item.item_name.rarity.value,
            name=item.item_name.name,
            prefix=item.item_name.prefix,
            suffix=item.item_name.suffix,
            display=str(item.item_name),
        ),
        ilvl=item.ilvl,
        sockets=item.sockets,
        stats=[StatLineResponse(name=s.name, value=str(s.value)) for s in item.stats],
        mods=[mod_to_response(m) for m in item.mods],
    )


def _parse_or_422(text: str) -> Item:
    """Parse item text, mapping size and decode failures to HTTP errors."""
    if len(text) > MAX_ITEM_TEXT_LENGTH:
        raise HTTPException(status_code=413, detail="Item text too long")
    try:
        return get_item_parser().parse_item(text)
    except ItemParseError as e:
        logger.warning("Item text rejected: %s", e)
        raise HTTPException(status_code=422, detail={
            "error": str(e),
            "section": e.section,
            "line_number": e.line_number,
        })


# =============================================================================
# API Endpoints
# =============================================================================

@app.get("/api/status", response_model=StatusResponse)
async def get_status():
    """Get the current application status."""
    return StatusResponse(status="ready", version=API_VERSION)


@app.post("/api/parse", response_model=ItemResponse)
async def parse_item_text(request: ParseRequest):
    """Decode one item's clipboard text."""
    item = _parse_or_422(request.text)
    return item_to_response(item)


@app.post("/api/check-roll", response_model=RollResultResponse)
async def check_item_roll(request: CheckRollRequest):
    """Check a rolled item against a roll target."""
    item = _parse_or_422(request.text)
    config = RollConfig(
        item_name=request.config.item_name,
        mods=[RollTarget(name=t.name, is_prefix=t.is_prefix) for t in request.config.mods],
        auto_aug_regal=request.config.auto_aug_regal,
    )
    result = check_roll(item, config, item_text=request.text)
    return RollResultResponse(
        has_prefix=result.has_prefix,
        has_suffix=result.has_suffix,
        has_mod=result.has_mod,
        needs_prefix=config.needs_prefix(),
        needs_suffix=config.needs_suffix(),
    )


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("Item Text Parser - Web Server")
    print("=" * 60)
    print("Starting server at http://localhost:8000")
    print("API docs available at http://localhost:8000/docs")
    print("=" * 60)
    uvicorn.run(app, host="127.0.0.1", port=8000)
