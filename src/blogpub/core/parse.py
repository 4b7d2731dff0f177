"""Document discovery, the post list file, and document reading"""

import json
from pathlib import Path

from blogpub.config import Category, Settings
from blogpub.core.models import RawDocument
from blogpub.util.fs import write_json
from blogpub.util.log import get_logger


logger = get_logger(__name__)

MD_EXTENSIONS = {".md"}


def discover_files(docs_dir: Path, categories: list[Category]) -> list[str]:
    """Return POSIX paths relative to docs_dir for every post under the category folders.

    Folders are visited in configuration order; dot-files are skipped and a
    missing folder is logged, not raised.
    """
    found: list[str] = []
    for c in categories:
        folder = docs_dir / c.folder
        if not folder.is_dir():
            logger.warning(f"Category folder not found: {folder}")
            continue
        paths = sorted(
            p for p in folder.rglob("*")
            if p.is_file() and p.suffix in MD_EXTENSIONS and not p.name.startswith(".")
        )
        found.extend(p.relative_to(docs_dir).as_posix() for p in paths)
        logger.info(f"Found {len(paths)} file(s) in {c.folder}/")
    return found


def write_posts_list(path: Path, paths: list[str]) -> None:
    write_json(path, paths)


def load_posts_list(path: Path) -> list[str]:
    """Read the post list. Raises FileNotFoundError if missing, ValueError if malformed."""
    if not path.exists():
        raise FileNotFoundError(f"Post list not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid post list {path}: {e}") from e
    if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
        raise ValueError(f"Invalid post list {path}: expected a JSON array of strings")
    return data


def post_paths(settings: Settings, *, scan_fallback: bool = False) -> list[str]:
    """Return the post list; with scan_fallback, rescan the docs folders when it is unusable."""
    try:
        return load_posts_list(Path(settings.posts_list))
    except (FileNotFoundError, ValueError) as e:
        if not scan_fallback:
            raise
        logger.warning(f"{e}; scanning {settings.docs_dir} instead")
        return discover_files(Path(settings.docs_dir), settings.categories)


def read_document(docs_dir: Path, rel_path: str) -> RawDocument:
    """Read one document. Raises FileNotFoundError / OSError / UnicodeDecodeError."""
    return RawDocument(text=(docs_dir / rel_path).read_text(encoding="utf-8"), path=rel_path)


def read_documents(docs_dir: Path, rel_paths: list[str]) -> list[RawDocument]:
    """Read every readable document; failures are logged and skipped."""
    docs = []
    for rel in rel_paths:
        try:
            docs.append(read_document(docs_dir, rel))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Skipping unreadable document {rel}: {e}")
    return docs
