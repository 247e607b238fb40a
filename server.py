import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from layoutfmt.errors import ParseError
from layoutfmt.formatter import format_layout, is_layout

logger = logging.getLogger(__name__)

app = FastAPI(title="Layout Formatter")

# Editors call in from arbitrary local origins.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class Document(BaseModel):
    text: str


class FormatResult(BaseModel):
    text: str
    changed: bool


class LayoutCheck(BaseModel):
    is_layout: bool


@app.exception_handler(ParseError)
async def parse_error_handler(_request: Request, error: ParseError) -> JSONResponse:
    logger.info("rejected document: %s", error)
    return JSONResponse(
        {
            "message": error.message,
            "offset": error.offset,
            "line": error.line,
            "snippet": error.snippet,
        },
        status_code=422,
    )


@app.post("/format")
async def format_endpoint(document: Document) -> FormatResult:
    output = format_layout(document.text)
    return FormatResult(text=output, changed=output != document.text)


@app.post("/is-layout")
async def is_layout_endpoint(document: Document) -> LayoutCheck:
    return LayoutCheck(is_layout=is_layout(document.text))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)

# Usage:
# uv run server.py
