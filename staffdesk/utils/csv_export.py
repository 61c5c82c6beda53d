"""
CSV export utilities
"""
import csv
import io
from typing import Iterable, Dict, List
from fastapi.responses import StreamingResponse


def stream_csv(headers: List[str], rows: Iterable[Dict], filename: str = "export.csv") -> StreamingResponse:
    """
    Stream CSV data as HTTP response

    Args:
        headers: List of column headers
        rows: Iterable of dictionaries keyed by header
        filename: Filename for Content-Disposition header

    Returns:
        StreamingResponse with CSV content
    """
    def generate():
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=headers, quoting=csv.QUOTE_MINIMAL)

        writer.writeheader()
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        for row in rows:
            # Missing keys are written as empty cells
            writer.writerow({header: "" if row.get(header) is None else str(row.get(header)) for header in headers})
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    return StreamingResponse(
        generate(),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"'
        }
    )
