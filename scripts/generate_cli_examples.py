from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "120"]
SOURCE_IMAGE = EXAMPLES_ROOT / "generate-default" / "mandelbrot.png"


@dataclass
class Expected:
    path: Path


@dataclass
class Example:
    name: str
    script: str
    args: list[str]
    expected: list[Expected]
    clean: list[Path] | None = None

    def full_args(self) -> list[str]:
        return [sys.executable, self.script, *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="generate-default",
        script="generate.py",
        args=[str(SOURCE_IMAGE)],
        expected=[Expected(SOURCE_IMAGE)],
        clean=[EXAMPLES_ROOT / "generate-default"],
    ),
    Example(
        name="generate-size",
        script="generate.py",
        args=[*BASE_ARGS, str(EXAMPLES_ROOT / "generate-size" / "small.png")],
        expected=[Expected(EXAMPLES_ROOT / "generate-size" / "small.png")],
        clean=[EXAMPLES_ROOT / "generate-size"],
    ),
    Example(
        name="generate-viewport",
        script="generate.py",
        args=[
            *BASE_ARGS,
            "--x-center",
            "-0.75",
            "--y-center",
            "0.1",
            "--x-width",
            "0.5",
            "--y-width",
            "0.375",
            str(EXAMPLES_ROOT / "generate-viewport" / "seahorse.png"),
        ],
        expected=[Expected(EXAMPLES_ROOT / "generate-viewport" / "seahorse.png")],
        clean=[EXAMPLES_ROOT / "generate-viewport"],
    ),
    Example(
        name="generate-gray",
        script="generate.py",
        args=[*BASE_ARGS, "--palette", "gray", str(EXAMPLES_ROOT / "generate-gray" / "gray.png")],
        expected=[Expected(EXAMPLES_ROOT / "generate-gray" / "gray.png")],
        clean=[EXAMPLES_ROOT / "generate-gray"],
    ),
    Example(
        name="generate-colormap",
        script="generate.py",
        args=[*BASE_ARGS, "--palette", "twilight_shifted", str(EXAMPLES_ROOT / "generate-colormap" / "twilight.png")],
        expected=[Expected(EXAMPLES_ROOT / "generate-colormap" / "twilight.png")],
        clean=[EXAMPLES_ROOT / "generate-colormap"],
    ),
    Example(
        name="generate-workers",
        script="generate.py",
        args=[*BASE_ARGS, "--workers", "1", str(EXAMPLES_ROOT / "generate-workers" / "single-thread.png")],
        expected=[Expected(EXAMPLES_ROOT / "generate-workers" / "single-thread.png")],
        clean=[EXAMPLES_ROOT / "generate-workers"],
    ),
    Example(
        name="convert",
        script="convert.py",
        args=[str(SOURCE_IMAGE), str(EXAMPLES_ROOT / "convert" / "rotated.png")],
        expected=[Expected(EXAMPLES_ROOT / "convert" / "rotated.png")],
        clean=[EXAMPLES_ROOT / "convert"],
    ),
    Example(
        name="convert-verbose",
        script="convert.py",
        args=["--verbose", str(SOURCE_IMAGE), str(EXAMPLES_ROOT / "convert-verbose" / "rotated.bmp")],
        expected=[Expected(EXAMPLES_ROOT / "convert-verbose" / "rotated.bmp")],
        clean=[EXAMPLES_ROOT / "convert-verbose"],
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _prepare(example: Example) -> None:
    clean = example.clean or []
    _ensure_clean(clean)
    for expected in example.expected:
        expected.path.parent.mkdir(parents=True, exist_ok=True)


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
