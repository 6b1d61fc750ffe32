"""Export the enrollment API's OpenAPI document."""

from __future__ import annotations

import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from enrollment.main import create_application


def main() -> None:
    app = create_application()
    document = app.openapi()
    destination = ROOT / "docs" / "openapi.json"
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(document, indent=2), encoding="utf-8")
    print(f"OpenAPI document written to {destination}")


if __name__ == "__main__":
    main()
