"""Classifier instructions and request formatting."""

from __future__ import annotations

from typing import Sequence

from gdriveorg.models import MAX_SNIPPET_CHARS, Category, FileDescriptor, Sensitivity

BINARY_PLACEHOLDER: str = "Binary file, infer context from name and type."
FILE_SEPARATOR: str = "\n---\n"

_CATEGORY_LINES = "\n".join(f"- {c.value}" for c in Category)
_SENSITIVITY_VALUES = ", ".join(f"'{s.value}'" for s in Sensitivity)

SYSTEM_INSTRUCTION: str = f"""
You are a principal digital archivist and information architect. Your work may
be audited and relied upon years later: do not guess, do not invent details.

MISSION
Recommend a folder placement, a clean human-readable name, an archive decision
and a sensitivity level for each file, using its name, type, modification date
and content snippet. Never propose modifying file contents.

ALLOWED TOP-LEVEL CATEGORIES (CHOOSE EXACTLY ONE)
{_CATEGORY_LINES}

If no category applies with high confidence, choose the most likely one (or
99_Archive), lower the confidence and write "Manual Review Required" in
reasoning together with the reason.

RENAMING RULES
- Sound like a competent human named it; keep the original extension.
- Preserve the original meaning; use YYYY-MM-DD only if the date is explicit.
- No ALL CAPS, no excessive underscores or separators.

PATH RULES
- suggestedPath is a slash-delimited folder path such as "Work/Projects/2024".
- Archived files go under 99_Archive/<Original Category>/<Year>.
- Use an empty string to leave the file where it is.

ARCHIVE LOGIC
Set shouldArchive to true only if the file is completed, obsolete or
reference-only, or belongs to a closed project or past fiscal year.

SENSITIVITY LOGIC
- 'High Risk': SSNs, passwords, API keys, credit card data.
- 'Confidential': internal financial reports, strategy documents, contracts.
- 'Normal': public or general information.

OUTPUT FORMAT
Return ONLY a JSON array with one object per file:
{{"fileId": str, "category": str, "suggestedPath": str, "suggestedName": str,
  "shouldArchive": bool, "sensitivity": one of {_SENSITIVITY_VALUES},
  "reasoning": str, "confidence": number between 0 and 1}}
fileId must repeat the File ID given for the file.
"""


def describe_file(descriptor: FileDescriptor) -> str:
    snippet = descriptor.content_snippet
    if snippet:
        snippet = snippet[:MAX_SNIPPET_CHARS]
    else:
        snippet = BINARY_PLACEHOLDER
    return (
        f"File ID: {descriptor.id}\n"
        f"Name: {descriptor.name}\n"
        f"Type: {descriptor.mime_type}\n"
        f"Modified: {descriptor.last_modified_iso}\n"
        f"Snippet: {snippet}"
    )


def build_user_prompt(batch: Sequence[FileDescriptor]) -> str:
    body = FILE_SEPARATOR.join(describe_file(d) for d in batch)
    return f"Analyze the following files and provide organization suggestions:\n\n{body}"
