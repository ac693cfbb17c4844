from typing import List, NamedTuple, Optional

RISK_LEVELS = {"low", "medium", "high"}
RISK_BADGES = {"high": "🔴", "medium": "🟠", "low": "🟢"}


class ThreatLine(NamedTuple):
    kind: str  # threat | risk | explanation | suggestions | bullet | text | break
    text: str
    risk_level: Optional[str] = None


def _after_colon(line: str) -> str:
    return line[line.index(":") + 1:].strip()


def classify_line(line: str) -> ThreatLine:
    """Match one line of the advisor's reply against the known prefixes."""
    lowered = line.lower()
    if lowered.startswith("threat:"):
        return ThreatLine("threat", line)
    if lowered.startswith("risk:"):
        level = _after_colon(line)
        normalized = level.lower()
        return ThreatLine("risk", level, normalized if normalized in RISK_LEVELS else None)
    if lowered.startswith("explanation:"):
        return ThreatLine("explanation", _after_colon(line))
    if lowered.startswith("suggestions:"):
        return ThreatLine("suggestions", line)
    if line.startswith("- "):
        return ThreatLine("bullet", line[2:])
    return ThreatLine("text", line)


def parse_threat_text(text: str) -> List[ThreatLine]:
    """
    Split the free-text outlook into labelled lines.

    Paragraphs are separated by a blank line and come back divided by a
    "break" entry. Lines that match no prefix are kept as plain text.
    """
    lines: List[ThreatLine] = []
    paragraphs = [p for p in (text or "").split("\n\n") if p.strip()]
    for i, paragraph in enumerate(paragraphs):
        if i:
            lines.append(ThreatLine("break", ""))
        for line in paragraph.split("\n"):
            if line.strip():
                lines.append(classify_line(line))
    return lines


def render_threat_markdown(text: str) -> str:
    out: List[str] = []
    for line in parse_threat_text(text):
        if line.kind == "break":
            out.append("")
        elif line.kind == "threat":
            out.append(f"**⚠️ {line.text}**")
        elif line.kind == "risk":
            badge = RISK_BADGES.get(line.risk_level or "")
            level = f"{badge} {line.text}" if badge else line.text
            out.append(f"**Risk:** {level}")
        elif line.kind == "explanation":
            out.append(f"**Explanation:** {line.text}")
        elif line.kind == "suggestions":
            out.append(f"**{line.text}**")
        elif line.kind == "bullet":
            out.append(f"- {line.text}")
        else:
            out.append(line.text)
        if line.kind not in {"bullet", "break"}:
            out.append("")
    return "\n".join(out).strip()
