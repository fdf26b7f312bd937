"""
Attachment formatters.

Each formatter turns the user's text plus its attachments into the content a
backend expects for a user turn. Attachments always come first and the user's
text last, so instructions following long material are never cut off.
"""

from typing import Any, Dict, List, Sequence, Union

from .types import Attachment


def format_file_text(attachment: Attachment) -> str:
    """
    Inline representation of a text attachment, shared by every backend.
    """
    return f"[File: {attachment.name}]\n{attachment.data}"


def format_claude_user_content(
    text: str,
    attachments: Sequence[Attachment],
) -> Union[str, List[Dict[str, Any]]]:
    """
    Build Claude user content.

    Images become base64 `image` blocks and PDFs native `document` blocks.

    Returns:
        The bare text when there are no attachments, otherwise a block list.
    """
    if not attachments:
        return text

    blocks: List[Dict[str, Any]] = []
    for att in attachments:
        if att.kind == "text":
            blocks.append({"type": "text", "text": format_file_text(att)})
        elif att.kind == "image":
            blocks.append({
                "type": "image",
                "source": {"type": "base64", "media_type": att.mime_type, "data": att.data},
            })
        elif att.kind == "pdf":
            blocks.append({
                "type": "document",
                "source": {"type": "base64", "media_type": "application/pdf", "data": att.data},
            })
    blocks.append({"type": "text", "text": text})
    return blocks


def format_openai_user_content(
    text: str,
    attachments: Sequence[Attachment],
) -> Union[str, List[Dict[str, Any]]]:
    """
    Build OpenAI-compatible user content.

    Images are sent as data URIs; PDFs have no native input here and are
    replaced by a short note naming the file.
    """
    if not attachments:
        return text

    parts: List[Dict[str, Any]] = []
    for att in attachments:
        if att.kind == "text":
            parts.append({"type": "text", "text": format_file_text(att)})
        elif att.kind == "image":
            parts.append({
                "type": "image_url",
                "image_url": {"url": f"data:{att.mime_type};base64,{att.data}", "detail": "auto"},
            })
        elif att.kind == "pdf":
            parts.append({
                "type": "text",
                "text": f"[Attached PDF: {att.name} (PDF not directly supported by this model)]",
            })
    parts.append({"type": "text", "text": text})
    return parts


def format_gemini_user_parts(
    text: str,
    attachments: Sequence[Attachment],
) -> List[Dict[str, Any]]:
    """
    Build Gemini user parts. Anything that is not plain text goes as inlineData.
    """
    if not attachments:
        return [{"text": text}]

    parts: List[Dict[str, Any]] = []
    for att in attachments:
        if att.kind == "text":
            parts.append({"text": format_file_text(att)})
        else:
            parts.append({"inlineData": {"mimeType": att.mime_type, "data": att.data}})
    parts.append({"text": text})
    return parts
