#!/usr/bin/env python3
from __future__ import annotations

import io
import re
import sys
import tempfile
import zipfile
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

import pandas as pd
import requests
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from fcr_parser import __version__ as TOOL_VERSION  # noqa: E402
from fcr_parser.columns import ALIAS_GROUPS  # noqa: E402
from fcr_parser.extractor import SECTION_BREAK, extract_columns, resolve_exclusions  # noqa: E402
from fcr_parser.report import COLUMN_KEYS, build_extraction_payload, json_dumps, render_text  # noqa: E402
from fcr_parser.transcript import build_transcript  # noqa: E402
from fcr_parser.workbook import WORKBOOK_FORMATS, convert_workbook_to_csv  # noqa: E402

TEXTUAL_EXTS = {".csv", ".txt"}
SUPPORTED_EXTS = TEXTUAL_EXTS | WORKBOOK_FORMATS
MAX_REMOTE_FILE_MB = 100
MAX_REMOTE_FILE_BYTES = MAX_REMOTE_FILE_MB * 1024 * 1024
CONTENT_TYPE_EXTS = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.ms-excel.sheet.macroenabled.12": ".xlsm",
    "text/csv": ".csv",
    "text/plain": ".txt",
}


def ensure_state() -> None:
    st.session_state.setdefault("results", [])
    st.session_state.setdefault("public_urls_input", "")


# ══════════════════════════════════════════════════════════════════════════════
# REMOTE SOURCES
# ══════════════════════════════════════════════════════════════════════════════

def normalize_public_url(raw_url: str) -> str:
    parsed = urlparse(raw_url.strip())
    if not parsed.scheme:
        raise ValueError("URL must start with http:// or https://")

    host = parsed.netloc.lower()
    path = parsed.path
    query = parse_qs(parsed.query, keep_blank_values=True)

    if host == "github.com" and "/blob/" in path:
        owner_repo, blob_path = path.lstrip("/").split("/blob/", 1)
        owner, repo = owner_repo.split("/", 1)
        branch, file_path = blob_path.split("/", 1)
        return f"https://raw.githubusercontent.com/{owner}/{repo}/{branch}/{file_path}"

    if "dropbox.com" in host:
        query["dl"] = ["1"]
        return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))

    if "box.com" in host:
        query["download"] = ["1"]
        return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))

    if host in {"drive.google.com", "docs.google.com"}:
        sheet_match = re.search(r"/spreadsheets/d/([^/]+)", path)
        if sheet_match:
            gid = query.get("gid", ["0"])[0]
            return (
                f"https://docs.google.com/spreadsheets/d/{sheet_match.group(1)}/export"
                f"?format=xlsx&gid={gid}"
            )
        match = re.search(r"/file/d/([^/]+)", path)
        if match:
            return f"https://drive.google.com/uc?export=download&id={match.group(1)}"
        if "id" in query:
            return f"https://drive.google.com/uc?export=download&id={query['id'][0]}"

    if host.endswith("1drv.ms") or "onedrive.live.com" in host:
        query["download"] = ["1"]
        return urlunparse(parsed._replace(query=urlencode(query, doseq=True)))

    return raw_url.strip()


def parse_public_urls(raw_urls: str) -> list[str]:
    return [line.strip() for line in raw_urls.splitlines() if line.strip()]


def remote_filename(raw_url: str, response: requests.Response) -> str:
    content_disposition = response.headers.get("content-disposition", "")
    match = re.search(r'filename\*=UTF-8\'\'([^;]+)|filename="([^"]+)"|filename=([^;]+)', content_disposition, re.I)
    if match:
        for group in match.groups():
            if group:
                return Path(group.strip().strip('"')).name
    redirected = response.url or raw_url
    return Path(urlparse(redirected).path).name or Path(urlparse(raw_url).path).name or "downloaded_file"


def infer_extension(raw_url: str, filename: str, content_type: str, content: bytes) -> str:
    ext = Path(filename).suffix.lower()
    if ext in SUPPORTED_EXTS:
        return ext

    content_type = content_type.split(";")[0].strip().lower()
    if content_type in CONTENT_TYPE_EXTS:
        return CONTENT_TYPE_EXTS[content_type]

    parsed = urlparse(raw_url)
    if "docs.google.com" in parsed.netloc.lower() and "/spreadsheets/" in parsed.path:
        return ".xlsx"

    if content.startswith(b"PK"):
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as zf:
                names = set(zf.namelist())
        except zipfile.BadZipFile:
            names = set()
        if "xl/vbaProject.bin" in names:
            return ".xlsm"
        if "xl/workbook.xml" in names:
            return ".xlsx"

    sample = content[:8192].decode("utf-8", errors="replace")
    if "," in sample:
        return ".csv"
    return ext


def fetch_remote_source(raw_url: str, folder: Path) -> dict:
    url = normalize_public_url(raw_url)
    response = requests.get(url, timeout=60, allow_redirects=True, stream=True)
    try:
        response.raise_for_status()
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > MAX_REMOTE_FILE_BYTES:
            raise ValueError(f"Remote file is larger than {MAX_REMOTE_FILE_MB} MB.")

        chunks: list[bytes] = []
        downloaded = 0
        for chunk in response.iter_content(chunk_size=1024 * 1024):
            if not chunk:
                continue
            downloaded += len(chunk)
            if downloaded > MAX_REMOTE_FILE_BYTES:
                raise ValueError(f"Remote file is larger than {MAX_REMOTE_FILE_MB} MB.")
            chunks.append(chunk)
        content = b"".join(chunks)
    finally:
        response.close()

    filename = remote_filename(raw_url, response)
    ext = infer_extension(raw_url, filename, response.headers.get("content-type", ""), content)
    if ext not in SUPPORTED_EXTS:
        raise ValueError(f"Unsupported remote file type: {ext or '[missing extension]'}")
    if not Path(filename).suffix:
        filename = f"{filename}{ext}"

    target = folder / filename
    target.write_bytes(content)
    return {"name": filename, "ext": ext, "path": target}


# ══════════════════════════════════════════════════════════════════════════════
# ANALYSIS
# ══════════════════════════════════════════════════════════════════════════════

def analyse_file(path: Path, columns: list[str]) -> dict:
    """Run extraction, exclusion and transcript for one local file."""
    source = path
    if path.suffix.lower() in WORKBOOK_FORMATS:
        source = convert_workbook_to_csv(path, path.with_name(f"{path.stem}-converted.csv"))

    warnings: list[str] = []
    extracted = extract_columns(source, {name: ALIAS_GROUPS[name] for name in columns}, warnings=warnings)
    excluded = sorted(resolve_exclusions(source))
    payload = build_extraction_payload(path, extracted, warnings=warnings)
    return {
        "name": path.name,
        "columns": extracted,
        "excluded": excluded,
        "transcript": build_transcript(source, set(excluded)),
        "payload": payload,
        "warnings": warnings,
    }


def column_frame(values: list[str]) -> pd.DataFrame:
    blocks = []
    block = 1
    for value in values:
        if value == SECTION_BREAK:
            block += 1
            continue
        blocks.append({"section": block, "value": value})
    return pd.DataFrame(blocks, columns=["section", "value"])


def process_sources(uploads, raw_urls: str, columns: list[str]) -> list[dict]:
    results: list[dict] = []
    with tempfile.TemporaryDirectory(prefix="fcr_parser_web_") as tmpdir:
        folder = Path(tmpdir)
        for upload in uploads or []:
            target = folder / Path(upload.name).name
            target.write_bytes(upload.getvalue())
            try:
                results.append(analyse_file(target, columns))
            except Exception as exc:
                results.append({"name": upload.name, "error": str(exc)})
        for url in parse_public_urls(raw_urls):
            try:
                remote = fetch_remote_source(url, folder)
                results.append(analyse_file(remote["path"], columns))
            except Exception as exc:
                results.append({"name": url, "error": str(exc)})
    return results


# ══════════════════════════════════════════════════════════════════════════════
# RENDERING
# ══════════════════════════════════════════════════════════════════════════════

def render_result(result: dict) -> None:
    st.subheader(result["name"])
    if "error" in result:
        st.error(result["error"])
        return
    for warning in result["warnings"]:
        st.warning(warning)

    for name, values in result["columns"].items():
        st.markdown(f"**{COLUMN_KEYS.get(name, name)}** ({len(values)} entries)")
        if values:
            st.dataframe(column_frame(values), hide_index=True)
        else:
            st.caption("Column not found in this file.")

    st.caption(f"Columns suppressed in transcript: {result['excluded'] or 'none'}")
    with st.expander("Cleaned transcript"):
        st.code(result["transcript"] or "(empty)", language="text")

    stem = Path(result["name"]).stem
    st.download_button("Download JSON", json_dumps(result["payload"]), file_name=f"{stem}.json", mime="application/json")
    st.download_button("Download text", render_text(result["payload"]), file_name=f"{stem}.txt", mime="text/plain")


def main() -> None:
    st.set_page_config(page_title="fcr-parser", layout="wide")
    ensure_state()

    st.title("fcr-parser")
    st.caption(f"Recover marks and cargo columns from receipt exports. v{TOOL_VERSION}")

    uploads = st.file_uploader(
        "Receipt files",
        type=[ext.lstrip(".") for ext in sorted(SUPPORTED_EXTS)],
        accept_multiple_files=True,
    )
    raw_urls = st.text_area("Public file URLs (one per line)", key="public_urls_input")
    columns = st.multiselect("Columns", options=list(ALIAS_GROUPS), default=["marks", "cargo"])

    if st.button("Run", type="primary", disabled=not (uploads or raw_urls.strip()) or not columns):
        with st.spinner("Extracting..."):
            st.session_state["results"] = process_sources(uploads, raw_urls, columns)

    if not st.session_state["results"]:
        st.info("Supported here: local uploads or public file URLs for .csv .txt .xlsx .xlsm")
        return
    for result in st.session_state["results"]:
        render_result(result)


if __name__ == "__main__":
    main()
