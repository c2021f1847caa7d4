"""
Markdown rendering for published meeting documents.

``render_meeting_markdown`` is a pure function of its inputs: no clock
reads and no randomness, so re-rendering the same meeting produces the
same bytes. ``parse_front_matter`` and ``summarize_document`` read the
documents back for the catalog.
"""

import re
from typing import Dict, List, Optional

from domain.models import MeetingInsight, Transcript, TranscriptSentence
from shared_utils.constants import DocumentConfig


_FRONT_MATTER = re.compile(r"^---\n(.*?)\n---", re.DOTALL)
_HEADING = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_TRANSCRIPT_SECTION = re.compile(r"## Meeting Transcript\s*\n(.*?)(?=\n---|\n## |\Z)", re.DOTALL)
_TIMESTAMP_PREFIX = re.compile(r"^\[\d+:\d{2}\]\s*")
_SPEAKER_PREFIX = re.compile(r"^\*\*[^*]+:\*\*\s*")

SUMMARY_MAX_CHARS = 280


def document_key(transcript_id: str, prefix: str = DocumentConfig.MEETING_PREFIX) -> str:
    """Blob-store key of the published document for *transcript_id*."""
    return f"{prefix.strip('/')}/meeting-{transcript_id}.md"


def format_timestamp(start_time: Optional[float]) -> str:
    """``[m:ss]`` for an offset in seconds, empty when unknown."""
    if start_time is None:
        return ""
    minutes = int(start_time // 60)
    seconds = int(start_time % 60)
    return f"[{minutes}:{seconds:02d}]"


def _sentence_line(sentence: TranscriptSentence) -> str:
    stamp = format_timestamp(sentence.start_time)
    line = f"**{sentence.speaker_name}:** {sentence.text}"
    return f"{stamp} {line}" if stamp else line


def _numbered(items: List[str]) -> str:
    return "\n".join(f"{i}. {item}" for i, item in enumerate(items, start=1))


def render_meeting_markdown(
    transcript: Transcript,
    insight: MeetingInsight,
    project_id: Optional[str],
) -> str:
    """Render the enriched meeting document.

    Args:
        transcript: Source transcript.
        insight: Extracted (or fallback) insight.
        project_id: Associated project, None when unmatched.

    Returns:
        Markdown body with front matter.
    """
    meeting_type = insight.meeting_type.value
    risks = "\n".join(
        f"- **{risk.severity.value.upper()}:** {risk.title}" for risk in insight.risks
    )
    sentences = "\n\n".join(_sentence_line(s) for s in transcript.sentences)

    lines = [
        "---",
        f"title: {transcript.title}",
        f"project_id: {project_id or 'unknown'}",
        f"meeting_type: {meeting_type}",
        f"date: {transcript.date}",
        f"duration: {transcript.duration_minutes} minutes",
        f"insights_generated: {len(insight.insights)}",
        f"action_items: {len(insight.action_items)}",
        f"risks_identified: {len(insight.risks)}",
        "---",
        "",
        f"# {transcript.title}",
        "",
        f"**Project:** {project_id or 'Not Associated'}",
        f"**Date:** {transcript.date[:10]}",
        f"**Type:** {meeting_type}",
        f"**AI Summary:** {insight.summary}",
        "",
        "## Business Intelligence",
        "",
        "### Action Items",
        _numbered(insight.action_items),
        "",
        "### Key Decisions",
        _numbered(insight.decisions),
        "",
        "### Risk Flags",
        risks,
        "",
        "## Meeting Transcript",
        "",
        sentences or "No transcript available.",
        "",
        "---",
        f"**Source:** {DocumentConfig.SOURCE_FOOTER}",
        "",
    ]
    return "\n".join(lines)


def parse_front_matter(content: str) -> Dict[str, str]:
    """Read the ``key: value`` front matter block of a document."""
    match = _FRONT_MATTER.match(content)
    if not match:
        return {}

    front_matter: Dict[str, str] = {}
    for line in match.group(1).splitlines():
        key, sep, value = line.partition(":")
        if sep and key.strip():
            front_matter[key.strip()] = value.strip()
    return front_matter


def document_title(content: str, fallback: str) -> str:
    front_matter = parse_front_matter(content)
    if front_matter.get("title"):
        return front_matter["title"]
    heading = _HEADING.search(content)
    return heading.group(1).strip() if heading else fallback


def summarize_document(content: str, title: str) -> str:
    """Short plain-text summary of a published document.

    Prefers the AI summary line, then the first substantive transcript
    lines, then a sentence built from the title.
    """
    for line in content.splitlines():
        if line.startswith("**AI Summary:**"):
            summary = line[len("**AI Summary:**"):].strip()
            if summary:
                return summary[:SUMMARY_MAX_CHARS]

    section = _TRANSCRIPT_SECTION.search(content)
    if section:
        meaningful = []
        for raw_line in section.group(1).splitlines():
            line = _SPEAKER_PREFIX.sub("", _TIMESTAMP_PREFIX.sub("", raw_line.strip())).strip()
            if len(line) > 30 and len(line.split()) > 4:
                meaningful.append(line)
            if len(meaningful) == 4:
                break
        if meaningful:
            summary = " ".join(meaningful)[:SUMMARY_MAX_CHARS]
            last_end = max(summary.rfind("."), summary.rfind("?"), summary.rfind("!"))
            if last_end > 200:
                return summary[:last_end + 1]
            return summary + "..."

    topic = re.sub(r"meeting", "", title, count=1, flags=re.IGNORECASE).strip().lower()
    return f"Meeting transcript discussing {topic or 'team collaboration and project updates'}"
