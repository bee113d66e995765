[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sheetgen"
version = "0.1.0"
description = "Generate music sheets and audio from context-sensitive stochastic L-systems"
requires-python = ">=3.10"
dependencies = [
    "platformdirs",
]
keywords = [
    "music",
    "l-system",
    "lilypond",
    "fluidsynth",
    "midi",
    "generative",
    "score",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
    "Topic :: Artistic Software",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sheetgen"]

[tool.hatch.build.targets.sdist]
include = [
    "sheetgen",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
