from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_WINDOW = ["160x120", "-2.0,1.2", "1.0,-1.2"]


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    output: Path
    args: list[str]
    window: list[str] | None = None

    @property
    def expected(self) -> list[Expected]:
        return [Expected(self.output)]

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", str(self.output), *(self.window or BASE_WINDOW), *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="default",
        output=EXAMPLES_ROOT / "default" / "mandel.png",
        args=[],
    ),
    Example(
        name="seahorse-valley",
        output=EXAMPLES_ROOT / "seahorse-valley" / "seahorse.png",
        args=[],
        window=["200x150", "-1.20,0.35", "-1.0,0.20"],
    ),
    Example(
        name="max-iterations",
        output=EXAMPLES_ROOT / "max-iterations" / "high-iterations.png",
        args=["--max-iterations", "1000"],
    ),
    Example(
        name="workers",
        output=EXAMPLES_ROOT / "workers" / "single-band.png",
        args=["--workers", "1"],
    ),
    Example(
        name="backend",
        output=EXAMPLES_ROOT / "backend" / "tensorflow.png",
        args=["--backend", "tensorflow"],
    ),
    Example(
        name="format",
        output=EXAMPLES_ROOT / "format" / "mandel",
        args=["--format", "bmp"],
    ),
    Example(
        name="verbose",
        output=EXAMPLES_ROOT / "verbose" / "diagnostic.png",
        args=["--verbose"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _prepare(example: Example) -> None:
    _ensure_clean([example.output.parent])
    example.output.parent.mkdir(parents=True, exist_ok=True)


def _verify(example: Example) -> None:
    for expected in example.expected:
        if not expected.path.is_file():
            raise RuntimeError(f"Expected file {expected.path} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _prepare(example)
        completed = subprocess.run(example.full_args(), check=True)
        if completed.returncode != 0:
            raise RuntimeError(f"Example {example.name} failed with {completed.returncode}")
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
