"""Comparación de texto entre versiones (Myers + limpieza semántica de diff-match-patch)."""

import html
from enum import Enum
from typing import List, Optional, Tuple

from diff_match_patch import diff_match_patch


class DiffOperation(str, Enum):
    EQUAL = "equal"
    INSERT = "insert"
    DELETE = "delete"


_DMP_OPERATIONS = {
    diff_match_patch.DIFF_EQUAL: DiffOperation.EQUAL,
    diff_match_patch.DIFF_INSERT: DiffOperation.INSERT,
    diff_match_patch.DIFF_DELETE: DiffOperation.DELETE,
}

DiffSegment = Tuple[DiffOperation, str]


def compute_diff(older: Optional[str], newer: Optional[str]) -> List[DiffSegment]:
    """Devuelve segmentos (operación, texto) que transforman `older` en `newer`.

    Sin límite de tiempo para que el resultado sea determinista. `None` equivale a "".
    """
    dmp = diff_match_patch()
    dmp.Diff_Timeout = 0
    diffs = dmp.diff_main(older or "", newer or "")
    dmp.diff_cleanupSemantic(diffs)
    return [(_DMP_OPERATIONS[op], text) for op, text in diffs if text]


def render_html(segments: List[DiffSegment]) -> str:
    parts = ['<div class="font-mono text-sm whitespace-pre-wrap">']
    for operation, text in segments:
        escaped = html.escape(text, quote=False).replace("\n", "<br/>")
        if operation == DiffOperation.INSERT:
            parts.append(f'<span class="bg-green-200 text-green-900">{escaped}</span>')
        elif operation == DiffOperation.DELETE:
            parts.append(f'<span class="bg-red-200 text-red-900 line-through">{escaped}</span>')
        else:
            parts.append(f'<span class="text-gray-700">{escaped}</span>')
    parts.append("</div>")
    return "".join(parts)
