from __future__ import annotations

from pathlib import Path

from setuptools import find_packages, setup


HERE = Path(__file__).resolve().parent
PACKAGE = "ezschedule"


def _read(name: str) -> str:
    path = HERE / name
    return path.read_text(encoding="utf-8").strip() if path.is_file() else ""


def _requirements(name: str) -> list[str]:
    """
    Package specs from a pip requirements file; comments and "-r" includes are skipped.
    """
    specs = (line.split("#", 1)[0].strip() for line in _read(name).splitlines())
    return [spec for spec in specs if spec and not spec.startswith("-")]


setup(
    name=PACKAGE,
    version=_read(f"{PACKAGE}/VERSION") or "0.1.0",
    description="EzSchedule: keep track of scheduled events from the terminal (CLI + interactive)",
    long_description=_read("README.md"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=("tests",)),
    package_data={PACKAGE: ["VERSION"]},
    python_requires=">=3.9",
    install_requires=_requirements("requirements.txt"),
    extras_require={"dev": _requirements("requirements-dev.txt")},
    entry_points={"console_scripts": [f"{PACKAGE}={PACKAGE}.cli:main"]},
)
