"""Deterministic content fixes for SEO findings, applied with backups"""

import re
from collections import Counter
from pathlib import Path, PurePosixPath

from blogpub.config import Settings
from blogpub.core.frontmatter import decode, render_document
from blogpub.core.models import OptimizationResult
from blogpub.util.fs import write_with_backup
from blogpub.util.log import get_logger


logger = get_logger(__name__)

EXCERPT_TARGET = 150
EXCERPT_MIN = 50
EXCERPT_MAX = 200
EXCERPT_TRIM = 160
TITLE_MAX = 60
MAX_TAGS = 5

CATEGORY_TAGS = {"blog": "博客", "ai": "AI", "practice": "实践"}
TITLE_TERMS = [
    "JavaScript", "TypeScript", "React", "Vue", "Node", "CSS", "HTML", "Web",
    "前端", "后端", "算法", "设计模式", "性能", "优化",
]
CONTENT_TERMS = [
    "javascript", "typescript", "react", "vue", "node", "css", "html",
    "webpack", "vite", "es6", "promise", "async", "await",
]

_IMAGE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_STRIP_RULES = [
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`[^`]+`"), ""),
    (_IMAGE, ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"^#+\s+", re.MULTILINE), ""),
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"\*([^*]+)\*"), r"\1"),
    (re.compile(r"\n+"), " "),
]
_SENTENCE_END = re.compile(r"[。！？.!?]")
_TITLE_TOKENS = re.compile(r"[\u4e00-\u9fa5]+|[a-zA-Z]+")


def _strip_markdown(content: str) -> str:
    text = content
    for pattern, repl in _STRIP_RULES:
        text = pattern.sub(repl, text)
    return text.strip()


def extract_excerpt(content: str, target_length: int = EXCERPT_TARGET) -> str:
    """Whole sentences up to target_length; a hard cut when that yields under 50 chars."""
    text = _strip_markdown(content)
    if not text:
        return ""

    excerpt = ""
    for sentence in (s for s in _SENTENCE_END.split(text) if len(s.strip()) > 10):
        if len(excerpt) + len(sentence) > target_length:
            break
        excerpt += sentence + "。"

    if len(excerpt) < 50:
        excerpt = text[:target_length].strip()
        last_period = excerpt.rfind("。")
        last_space = excerpt.rfind(" ")
        if last_period > 50:
            excerpt = excerpt[:last_period + 1]
        elif last_space > 50:
            excerpt = excerpt[:last_space] + "..."
        else:
            excerpt += "..."
    return excerpt.strip()


def extract_tags(content: str, title: str, category: str) -> list[str]:
    """Category tag, technical terms from the title, then terms found in the body."""
    tags: list[str] = []
    if category in CATEGORY_TAGS:
        tags.append(CATEGORY_TAGS[category])

    for keyword in _TITLE_TOKENS.findall(title):
        if any(term in keyword or keyword in term for term in TITLE_TERMS) and keyword not in tags:
            tags.append(keyword)

    lower = content.lower()
    for term in CONTENT_TERMS:
        if term in lower and len(tags) < MAX_TAGS:
            tag = term[0].upper() + term[1:]
            if tag not in tags:
                tags.append(tag)
    return tags[:MAX_TAGS]


def trim_excerpt(excerpt: str) -> str:
    cut = excerpt[:EXCERPT_TRIM - 3].strip()
    last_period = cut.rfind("。")
    return cut[:last_period + 1] if last_period > 100 else cut + "..."


def fix_image_alts(body: str) -> tuple[str, list[str]]:
    """Give alt-less images an alt derived from their filename."""
    fixed: list[str] = []

    def _repl(m: re.Match) -> str:
        if m.group(1).strip():
            return m.group(0)
        src = (m.group(2).split() or [""])[0]
        alt = re.sub(r"[-_]", " ", PurePosixPath(src).stem).strip() or "文章配图"
        fixed.append(alt)
        return f"![{alt}]({m.group(2)})"

    return _IMAGE.sub(_repl, body), fixed


def optimize_metadata(metadata: dict, body: str) -> tuple[dict, str, list[str]]:
    """Return (metadata, body, changes) with all fixes applied in memory."""
    meta = dict(metadata)
    changes: list[str] = []

    excerpt = meta.get("excerpt").strip() if isinstance(meta.get("excerpt"), str) else ""
    if not excerpt:
        new = extract_excerpt(body)
        if new:
            meta["excerpt"] = new
            changes.append(f"excerpt added: {new[:50]}...")
    elif len(excerpt) < EXCERPT_MIN:
        new = extract_excerpt(body)
        if len(new) > len(excerpt):
            meta["excerpt"] = new
            changes.append(f"excerpt expanded: {len(excerpt)} -> {len(new)} chars")
    elif len(excerpt) > EXCERPT_MAX:
        new = trim_excerpt(excerpt)
        meta["excerpt"] = new
        changes.append(f"excerpt trimmed: {len(excerpt)} -> {len(new)} chars")

    title = meta.get("title") if isinstance(meta.get("title"), str) else ""
    if len(title) > TITLE_MAX:
        new = title[:TITLE_MAX - 3].strip() + "..."
        meta["title"] = new
        changes.append(f"title shortened: {len(title)} -> {len(new)} chars")

    if not meta.get("tags"):
        category = meta.get("category") if isinstance(meta.get("category"), str) else "blog"
        tags = extract_tags(body, title, category or "blog")
        if tags:
            meta["tags"] = tags
            changes.append(f"tags added: {', '.join(tags)}")

    body, alts = fix_image_alts(body)
    changes += [f"image alt fixed: {alt}" for alt in alts]
    return meta, body, changes


def optimize_post(docs_dir: Path, rel_path: str, settings: Settings, dry_run: bool = False) -> OptimizationResult:
    """Optimize one document; the original is backed up before it is rewritten."""
    result = OptimizationResult(file=rel_path)
    target = docs_dir / rel_path
    try:
        metadata, body = decode(target.read_text(encoding="utf-8"))
        if not metadata:
            logger.info(f"{rel_path}: no frontmatter, run `blogpub process` first")
            return result
        new_meta, new_body, changes = optimize_metadata(metadata, body)
        result.changes = changes
        if changes and not dry_run:
            write_with_backup(target, Path(settings.backup_dir) / rel_path, render_document(new_meta, new_body))
    except (OSError, UnicodeDecodeError) as e:
        result.success = False
        result.error = str(e)
    return result


def change_kind(change: str) -> str:
    return change.split(":", 1)[0]


def optimize_all(
    paths: list[str],
    settings: Settings,
    dry_run: bool = False,
    ) -> tuple[dict[str, int], Counter, list[OptimizationResult]]:
    """Optimize every listed document. Returns (counts, change kinds, results)."""
    docs_dir = Path(settings.docs_dir)
    counts = {"total": len(paths), "optimized": 0, "skipped": 0, "errors": 0}
    kinds: Counter = Counter()
    results = []
    for rel in paths:
        if not (docs_dir / rel).exists():
            counts["skipped"] += 1
            continue
        result = optimize_post(docs_dir, rel, settings, dry_run)
        results.append(result)
        if not result.success:
            counts["errors"] += 1
            logger.error(f"{rel}: {result.error}")
        elif result.changes:
            counts["optimized"] += 1
            kinds.update(change_kind(c) for c in result.changes)
        else:
            counts["skipped"] += 1
    return counts, kinds, results
