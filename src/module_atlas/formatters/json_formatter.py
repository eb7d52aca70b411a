"""JSON output: one document, or one file per list."""

import json
from pathlib import Path

from ..graph.models import AnalysisResult
from ..logging_config import get_logger
from .base import BaseFormatter

logger = get_logger(__name__)

# List name -> file written by write_json_lists
OUTPUT_FILES = {
    "ModuleArray": "ModuleArray.json",
    "DependencyList": "DependencyList.json",
    "ExportList": "ExportList.json",
    "Errors": "Errors.json",
    "ClassList": "ClassList.json",
}


class JsonFormatter(BaseFormatter):
    """Render the full result as a single JSON document."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        data = result.to_dict()
        data["NodeModules"] = result.node_modules()
        data["cancelled"] = result.cancelled
        return json.dumps(data, indent=2)


def write_json_lists(
    result: AnalysisResult, output_dir: Path, include_classes: bool = False
) -> list[Path]:
    """Write each output list to its own file under output_dir.

    ClassList.json is only written when include_classes is set.

    Returns:
        Paths written, in OUTPUT_FILES order
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    data = result.to_dict()
    written: list[Path] = []
    for key, filename in OUTPUT_FILES.items():
        if key == "ClassList" and not include_classes:
            continue
        path = output_dir / filename
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data[key], f, indent=2)
            f.write("\n")
        written.append(path)
        logger.debug(f"Wrote {len(data[key])} entries to {path}")

    return written
